import os

ASYNC_MODE = os.environ.get('SOCKETIO_ASYNC_MODE', 'gevent')
if ASYNC_MODE == 'gevent':
    from gevent import monkey
    monkey.patch_all()

from flask import Flask, request, jsonify
from flask_socketio import SocketIO, emit
from game.ai import compute_move
from game.request import DIFFICULTIES, InvalidRequest, parse_move_request
import logging, random

LOG_LEVELS = ('DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL')

# ── AI settings ───────────────────────────────────────────────────────────────
#   AI_DEFAULT_DIFFICULTY  used when a request has no "difficulty"  (hard)
#   AI_RANDOM_SEED         seed every request's generator → reproducible play
#   LOG_LEVEL              DEBUG / INFO / WARNING / ERROR / CRITICAL  (INFO)
def load_ai_config(environ):
    """Checked once at import so a bad deployment fails before serving."""
    difficulty = environ.get('AI_DEFAULT_DIFFICULTY', 'hard').strip().lower()
    if difficulty not in DIFFICULTIES:
        raise RuntimeError(f"AI_DEFAULT_DIFFICULTY must be one of {', '.join(DIFFICULTIES)}, "
                           f"got {difficulty!r}")
    seed = environ.get('AI_RANDOM_SEED', '').strip()
    try:
        seed = int(seed) if seed else None
    except ValueError:
        raise RuntimeError(f"AI_RANDOM_SEED must be an integer, got {seed!r}") from None
    level = environ.get('LOG_LEVEL', 'INFO').strip().upper()
    if level not in LOG_LEVELS:
        raise RuntimeError(f"LOG_LEVEL must be one of {', '.join(LOG_LEVELS)}, got {level!r}")
    return {'AI_DEFAULT_DIFFICULTY': difficulty, 'AI_RANDOM_SEED': seed, 'LOG_LEVEL': level}

app = Flask(__name__)
app.config['SECRET_KEY'] = os.environ.get('SECRET_KEY', 'a_secret_key')
app.config.update(load_ai_config(os.environ))

logging.basicConfig(level=app.config['LOG_LEVEL'],
                    format="%(asctime)s %(levelname)s %(message)s")
app.logger.setLevel(app.config['LOG_LEVEL'])

socketio = SocketIO(app, async_mode=ASYNC_MODE)


# ── Helpers ───────────────────────────────────────────────────────────────────
def new_rng():
    return random.Random(app.config.get('AI_RANDOM_SEED'))

def handle_ai_move(data):
    req = parse_move_request(data, default_difficulty=app.config['AI_DEFAULT_DIFFICULTY'])
    return compute_move(req, rng=new_rng())


# ── Routes ───────────────────────────────────────────────────────────────────
@app.route('/health')
def health(): return jsonify(status='ok')

@app.route('/getAiMove', methods=['POST'])
def get_ai_move_route():
    # Callable envelope: {"data": {...}} in, {"result": {...}} out. Bare objects work too.
    body = request.get_json(silent=True)
    data = body.get('data', body) if isinstance(body, dict) else body
    try:
        result = handle_ai_move(data)
    except InvalidRequest as e:
        app.logger.warning("Rejected AI move request: %s", e)
        return jsonify(error={'status': 'INVALID_ARGUMENT', 'message': str(e)}), 400
    return jsonify(result=result)


# ── Socket events ─────────────────────────────────────────────────────────────
@socketio.on('getAiMove')
def get_ai_move_event(data=None):
    try:
        result = handle_ai_move(data)
    except InvalidRequest as e:
        app.logger.warning("Rejected AI move request: %s", e)
        emit('aiMoveError', {'message': str(e)})
        return {'error': str(e)}
    emit('aiMove', result)
    return result


if __name__ == "__main__":
    socketio.run(app, host=os.environ.get('HOST', '127.0.0.1'),
                 port=int(os.environ.get('PORT', 5000)),
                 debug=os.environ.get('FLASK_DEBUG') == '1')
