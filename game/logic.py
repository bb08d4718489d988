WIN_LINES = [
    (0,1,2),(3,4,5),(6,7,8),
    (0,3,6),(1,4,7),(2,5,8),
    (0,4,8),(2,4,6)
]

EMPTY   = None
MARKS   = ("X", "O")
DRAW    = "D"
CENTER  = 4
CORNERS = frozenset({0, 2, 6, 8})


def other(mark):
    return "O" if mark == "X" else "X"

def has_win(board, mark):
    return any(board[a] == board[b] == board[c] == mark for a, b, c in WIN_LINES)

def with_move(board, cell, mark):
    """Copy of ``board`` with ``cell`` set to ``mark``; the input is left alone."""
    if not 0 <= cell < 9:
        raise IndexError(f"cell index out of range: {cell}")
    new = list(board)
    new[cell] = mark
    return tuple(new) if isinstance(board, tuple) else new

def empty_cells(board):
    return [i for i in range(9) if board[i] is EMPTY]

def board_outcome(board):
    """None while the board is still in play, else 'X', 'O' or 'D'."""
    for mark in MARKS:
        if has_win(board, mark): return mark
    return DRAW if EMPTY not in board else None

def required_wins(board_count):
    return 1 if board_count <= 1 else board_count // 2 + 1

def completes_match(board_index, mark, outcomes, needed):
    won = sum(1 for i, o in enumerate(outcomes) if i != board_index and o == mark)
    return won + 1 >= needed


class Match:
    """Boards of one request plus their outcomes.

    ``outcomes[i]`` is None for an active board. Built fresh per request and
    never shared.
    """
    __slots__ = ('boards', 'outcomes', 'required_wins')

    def __init__(self, boards, outcomes=None, board_count=None):
        self.boards   = [tuple(b) for b in boards]
        if outcomes is None: outcomes = [None] * len(self.boards)
        # A finished tag stands; an active tag defers to the cells
        self.outcomes = [o if o is not None else board_outcome(b)
                         for o, b in zip(outcomes, self.boards)]
        n = board_count if board_count is not None else len(self.boards)
        self.required_wins = required_wins(n)

    def is_active(self, b):
        return self.outcomes[b] is None and EMPTY in self.boards[b]

    def active_boards(self):
        return [b for b in range(len(self.boards)) if self.is_active(b)]

    def legal_moves(self):
        return [(b, c) for b in self.active_boards() for c in empty_cells(self.boards[b])]

    def __repr__(self):
        return f"Match(boards={len(self.boards)}, outcomes={self.outcomes}, required_wins={self.required_wins})"
