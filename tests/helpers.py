from tictactoe.board import empty_board, place


def board_from(text):
    """Build a board from a 9 character string such as ``"XX_O_____"``."""
    board = empty_board()
    for index, value in enumerate(text):
        if value in ("X", "O"):
            board = place(board, index, value)
    return board
