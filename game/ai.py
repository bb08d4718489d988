"""AI move selection — easy / medium / hard difficulties.

STRATEGIES
──────────
easy    Every legal move gets an independent random score, best one wins.
        Effectively a uniform random pick.

medium / hard (same engine)
        One active board left  → exhaustive minimax on that board.
        Several active boards  → additive priority scoring per move:
            match win      1,000,000
            match block      500,000
            board win         15,000
            board block       10,000
            centre cell          500
            corner cell          200
        Ties at the top score are broken at random.

Every entry point takes an explicit ``random.Random`` so a seeded generator
reproduces the same game.
"""
import logging, math, random
from functools import lru_cache
from .logic import (CENTER, CORNERS, EMPTY, Match, completes_match, empty_cells,
                    has_win, other, with_move)
from .request import DIFFICULTIES, format_move

log = logging.getLogger(__name__)

# ── Move scores ───────────────────────────────────────────────────────────────
MATCH_WIN    = 1_000_000
MATCH_BLOCK  =   500_000
BOARD_WIN    =    15_000
BOARD_BLOCK  =    10_000
CENTER_BONUS =       500
CORNER_BONUS =       200
RANDOM_SCORE_RANGE = 100


# ── Minimax (single board) ────────────────────────────────────────────────────
@lru_cache(maxsize=None)
def _minimax(board, depth, maximizing, ai, opp):
    if has_win(board, opp): return -10 + depth
    if has_win(board, ai):  return 10 - depth
    moves = empty_cells(board)
    if not moves: return 0
    if maximizing:
        return max(_minimax(with_move(board, c, ai), depth+1, False, ai, opp) for c in moves)
    return min(_minimax(with_move(board, c, opp), depth+1, True, ai, opp) for c in moves)

def best_move(board, ai, opp=None):
    """Optimal cell for ``ai`` on one board as ``(cell, score)``.

    Faster wins and slower losses score higher. Equal scores keep the lowest
    cell index. Returns ``(None, 0)`` on a full board.
    """
    opp   = opp or other(ai)
    board = tuple(board)
    moves = empty_cells(board)
    if not moves: return None, 0

    # Opening: centre is always safe on an empty board or after an off-centre reply
    if len(moves) == 9 or (len(moves) == 8 and board[CENTER] is EMPTY):
        return CENTER, 0

    best_cell, best_score = None, -math.inf
    for c in moves:
        score = _minimax(with_move(board, c, ai), 0, False, ai, opp)
        if score > best_score:
            best_cell, best_score = c, score
    if best_cell is None:
        log.warning("[ai] minimax found no best cell on %s; falling back to %d", board, moves[0])
        return moves[0], 0
    return best_cell, best_score


# ── Heuristic scoring (multi-board) ───────────────────────────────────────────
def score_moves(match, mark):
    """Every legal move of ``match`` paired with its additive priority score."""
    opp    = other(mark)
    scored = []
    for b, c in match.legal_moves():
        board  = match.boards[b]
        wins   = has_win(with_move(board, c, mark), mark)
        blocks = has_win(with_move(board, c, opp), opp)
        score  = 0
        if wins and completes_match(b, mark, match.outcomes, match.required_wins):
            score += MATCH_WIN
        # Opponent threat measured on the current outcomes, ignoring our own pending win
        if blocks and completes_match(b, opp, match.outcomes, match.required_wins):
            score += MATCH_BLOCK
        if wins:          score += BOARD_WIN
        if blocks:        score += BOARD_BLOCK
        if c == CENTER:   score += CENTER_BONUS
        if c in CORNERS:  score += CORNER_BONUS
        scored.append(((b, c), score))
    return scored

def random_scores(match, rng):
    return [(m, rng.random() * RANDOM_SCORE_RANGE) for m in match.legal_moves()]

def pick_best(scored, rng):
    """Uniform random choice among the moves sharing the top score."""
    if not scored: return None
    top = max(s for _, s in scored)
    return rng.choice([m for m, s in scored if s == top])


# ── Strategies ────────────────────────────────────────────────────────────────
class Strategy:
    name = 'base'

    def choose(self, match, mark, rng):
        raise NotImplementedError

    def __repr__(self):
        return f"<{type(self).__name__}>"

class ScoredStrategy(Strategy):
    """Scores every legal move, then picks among the top scores."""

    def score(self, match, mark, rng):
        raise NotImplementedError

    def choose(self, match, mark, rng):
        return pick_best(self.score(match, mark, rng), rng)

class HeuristicStrategy(ScoredStrategy):
    name = 'heuristic'

    def score(self, match, mark, rng):
        return score_moves(match, mark)

class RandomStrategy(ScoredStrategy):
    name = 'random'

    def score(self, match, mark, rng):
        return random_scores(match, rng)

class ExhaustiveSearchStrategy(Strategy):
    name = 'minimax'

    def choose(self, match, mark, rng):
        active = match.active_boards()
        if not active: return None
        b = active[0]
        cell, _ = best_move(match.boards[b], mark)
        return None if cell is None else (b, cell)

_STRATEGIES = {
    'random':    RandomStrategy(),
    'heuristic': HeuristicStrategy(),
    'minimax':   ExhaustiveSearchStrategy(),
}

def select_strategy(difficulty, active_boards):
    if difficulty not in DIFFICULTIES:
        raise ValueError(f"unknown difficulty: {difficulty!r}")
    if difficulty == 'easy':  return _STRATEGIES['random']
    if active_boards == 1:    return _STRATEGIES['minimax']
    return _STRATEGIES['heuristic']


# ── Public API ────────────────────────────────────────────────────────────────
def get_ai_move(match, player, difficulty='hard', rng=None):
    """(board, cell) for ``player`` or None once no legal move is left."""
    rng   = rng if rng is not None else random.Random()
    valid = match.legal_moves()
    if not valid: return None
    strategy = select_strategy(difficulty, len(match.active_boards()))
    move = strategy.choose(match, player, rng)
    if move not in valid:
        log.warning("[ai] %s strategy returned %r; falling back to %r", strategy.name, move, valid[0])
        return valid[0]
    return move

def compute_move(req, rng=None):
    """Run a parsed ``MoveRequest`` and build its response payload."""
    log.info("Received request for AI move: boards=%d player=%s difficulty=%s",
             len(req.boards), req.player, req.difficulty)
    match  = Match(req.boards, req.outcomes, req.board_count)
    move   = get_ai_move(match, req.player, req.difficulty, rng)
    result = format_move(req, move)
    log.info("Calculated AI move: %s", result)
    return result
