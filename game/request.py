"""Request normalization for the AI move endpoint.

Clients send cells as "X"/"O" plus a zoo of empty markers ("", null, "none",
"undefined"). Everything is folded to one empty value here so the engine
only ever compares against ``EMPTY``.
"""
from .logic import DRAW, EMPTY, MARKS, board_outcome

DIFFICULTIES = ('easy', 'medium', 'hard')

_EMPTY_TOKENS  = frozenset({'', 'none', 'null', 'undefined'})
_ACTIVE_TOKENS = _EMPTY_TOKENS | {'active'}
_DRAW_TOKENS   = frozenset({'d', 'draw', 'drawn', 'tie'})


class InvalidRequest(ValueError):
    """Board data the engine refuses to look at."""


class MoveRequest:
    __slots__ = ('boards', 'outcomes', 'player', 'difficulty', 'board_count', 'single')

    def __init__(self, boards, outcomes, player, difficulty='hard', board_count=None):
        self.boards      = boards
        self.outcomes    = outcomes
        self.player      = player
        self.difficulty  = difficulty
        self.board_count = board_count if board_count is not None else len(boards)
        self.single      = len(boards) == 1

    def __repr__(self):
        return (f"MoveRequest(boards={len(self.boards)}, player={self.player!r}, "
                f"difficulty={self.difficulty!r}, board_count={self.board_count})")


# ── Cells / outcomes ──────────────────────────────────────────────────────────
def normalize_cell(value):
    if value is None: return EMPTY
    if isinstance(value, str):
        v = value.strip()
        if v.lower() in _EMPTY_TOKENS: return EMPTY
        if v.upper() in MARKS: return v.upper()
    raise InvalidRequest(f"unknown cell value: {value!r}")

def normalize_outcome(value):
    """None for an active board, else 'X', 'O' or 'D'."""
    if value is None: return None
    if isinstance(value, str):
        v = value.strip()
        if v.lower() in _ACTIVE_TOKENS: return None
        if v.lower() in _DRAW_TOKENS:   return DRAW
        if v.upper() in MARKS:          return v.upper()
    raise InvalidRequest(f"unknown board outcome: {value!r}")

def normalize_board(board, index=0):
    if not isinstance(board, (list, tuple)) or len(board) != 9:
        raise InvalidRequest(f"board {index} must be a list of exactly 9 cells")
    return [normalize_cell(v) for v in board]

def _merge_outcome(tag, board):
    # A finished tag from the client stands; otherwise trust the cells
    return tag if tag is not None else board_outcome(board)


# ── Parsing ───────────────────────────────────────────────────────────────────
def parse_move_request(data, default_difficulty='hard'):
    if not isinstance(data, dict):
        raise InvalidRequest("request data must be an object")

    if data.get('boards') is not None:
        raw = data['boards']
    elif data.get('board') is not None:
        raw = [data['board']]
    else:
        raise InvalidRequest("missing board data")
    if not isinstance(raw, (list, tuple)):
        raise InvalidRequest("boards must be a list")
    if not raw:
        raise InvalidRequest("no boards supplied")
    boards = [normalize_board(b, i) for i, b in enumerate(raw)]

    raw_out = data.get('boardOutcomes')
    if raw_out is None:
        outcomes = [board_outcome(b) for b in boards]
    else:
        if not isinstance(raw_out, (list, tuple)) or len(raw_out) != len(boards):
            raise InvalidRequest("boardOutcomes must list one outcome per board")
        outcomes = [_merge_outcome(normalize_outcome(t), b) for t, b in zip(raw_out, boards)]

    player = data.get('player')
    player = player.strip().upper() if isinstance(player, str) else player
    if player not in MARKS:
        raise InvalidRequest("player must be 'X' or 'O'")

    difficulty = data.get('difficulty')
    if difficulty is None: difficulty = default_difficulty
    difficulty = difficulty.strip().lower() if isinstance(difficulty, str) else difficulty
    if difficulty not in DIFFICULTIES:
        raise InvalidRequest(f"difficulty must be one of {', '.join(DIFFICULTIES)}")

    board_count = data.get('boardCount')
    if board_count is not None:
        if isinstance(board_count, bool) or not isinstance(board_count, int) or board_count < 1:
            raise InvalidRequest("boardCount must be a positive integer")

    return MoveRequest(boards, outcomes, player, difficulty, board_count)


# ── Response ──────────────────────────────────────────────────────────────────
def format_move(req, move):
    """Single board → {"move": cell}; several → {"boardIndex", "cellIndex"}.

    No legal move is ``{"move": -1}`` in both modes.
    """
    if move is None: return {"move": -1}
    if req.single:   return {"move": move[1]}
    return {"boardIndex": move[0], "cellIndex": move[1]}
