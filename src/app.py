"""
Flask web application for the live tournament bracket.
"""
import os
import yaml
from flask import Flask, request, jsonify, Response, stream_with_context
from core.errors import BracketError
from core.tournament import TournamentService
from live import LiveBroadcaster, generate_live_events

app = Flask(__name__)

BASE_DIR = os.path.dirname(os.path.dirname(__file__))
DATA_DIR = os.environ.get('TOURNAMENT_DATA_DIR', os.path.join(BASE_DIR, 'data'))
SETTINGS_FILE = os.environ.get('TOURNAMENT_SETTINGS_FILE', os.path.join(DATA_DIR, 'settings.yaml'))
HOST = os.environ.get('HOST', '0.0.0.0')
PORT = int(os.environ.get('PORT', 8000))


def get_default_settings():
    """Return default tournament settings."""
    return {
        'max_players': 32,
        'shuffle_players': True,
        'heartbeat_seconds': 15,
        'subscriber_queue_size': 16,
    }


def load_settings(path: str = None) -> dict:
    """Load settings from YAML, falling back to defaults for anything missing."""
    path = path or SETTINGS_FILE
    settings = get_default_settings()
    if not os.path.exists(path):
        return settings
    try:
        with open(path, 'r', encoding='utf-8') as f:
            data = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as e:
        app.logger.warning(f'Failed to parse {path}: {e}')
        return settings
    if not isinstance(data, dict):
        app.logger.warning(f'Ignoring {path}: expected a mapping')
        return settings
    for key, default in settings.items():
        if key not in data:
            continue
        value = data[key]
        if isinstance(default, bool):
            valid = isinstance(value, bool)
        else:
            valid = isinstance(value, (int, float)) and not isinstance(value, bool) and value > 0
        if valid:
            settings[key] = value
        else:
            app.logger.warning(f'Ignoring setting {key}={data[key]!r}: expected {type(default).__name__}')
    return settings


def create_tournament(settings: dict):
    """Wire a fresh tournament to a fresh broadcaster."""
    broadcaster = LiveBroadcaster(queue_size=settings['subscriber_queue_size'])
    service = TournamentService(
        max_players=settings['max_players'],
        shuffle_players=settings['shuffle_players'],
    )
    service.add_listener(broadcaster.publish)
    return service, broadcaster


settings = load_settings()
tournament, broadcaster = create_tournament(settings)


@app.errorhandler(BracketError)
def handle_bracket_error(e):
    app.logger.warning(f'Rejected {request.path}: {e}')
    return jsonify({'error': str(e), 'code': e.code}), e.status_code


def _get_json() -> dict:
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}


def _is_index(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


@app.route('/api/state')
def api_state():
    """Current tournament snapshot."""
    return jsonify(tournament.snapshot())


@app.route('/api/players', methods=['POST'])
def api_set_players():
    """Replace the whole roster."""
    data = _get_json()
    players = data.get('players')
    if not isinstance(players, list):
        return jsonify({'error': 'Missing players list'}), 400
    state = tournament.set_players(players)
    return jsonify({'success': True, 'state': state})


@app.route('/api/players/add', methods=['POST'])
def api_add_player():
    data = _get_json()
    name = data.get('name')
    if not isinstance(name, str):
        return jsonify({'error': 'Missing player name'}), 400
    state = tournament.add_player(name)
    return jsonify({'success': True, 'state': state})


@app.route('/api/players/remove', methods=['POST'])
def api_remove_player():
    data = _get_json()
    name = data.get('name')
    if not isinstance(name, str):
        return jsonify({'error': 'Missing player name'}), 400
    state = tournament.remove_player(name)
    return jsonify({'success': True, 'state': state})


@app.route('/api/start', methods=['POST'])
def api_start():
    """Build the bracket and start the tournament."""
    data = _get_json()
    players = data.get('players')
    shuffle = data.get('shuffle')
    if players is not None and not isinstance(players, list):
        return jsonify({'error': 'players must be a list'}), 400
    if shuffle is not None and not isinstance(shuffle, bool):
        return jsonify({'error': 'shuffle must be true or false'}), 400
    state = tournament.start(players=players, shuffle=shuffle)
    app.logger.info(f'Tournament started: {len(state["players"])} players')
    return jsonify({'success': True, 'state': state})


@app.route('/api/winner', methods=['POST'])
def api_select_winner():
    """Record (or clear, with a null winner) the winner of one match."""
    data = _get_json()
    round_index = data.get('round')
    position = data.get('position')
    if not _is_index(round_index) or not _is_index(position):
        return jsonify({'error': 'round and position must be integers'}), 400
    if 'winner' not in data:
        return jsonify({'error': 'Missing winner'}), 400
    winner = data['winner']
    if winner is not None and not isinstance(winner, str):
        return jsonify({'error': 'winner must be a name or null'}), 400

    state = tournament.select_winner(round_index, position, winner)
    response = {'success': True, 'state': state}
    if state['champion']:
        response['champion'] = state['champion']
    return jsonify(response)


@app.route('/api/reset', methods=['POST'])
def api_reset():
    state = tournament.reset()
    app.logger.info('Tournament reset')
    return jsonify({'success': True, 'state': state})


@app.route('/api/live-stream')
def api_live_stream():
    """Server-Sent Events stream of full tournament snapshots."""
    return Response(
        stream_with_context(generate_live_events(broadcaster, tournament, settings['heartbeat_seconds'])),
        mimetype='text/event-stream',
        headers={
            'Cache-Control': 'no-cache',
            'X-Accel-Buffering': 'no',
        },
    )


if __name__ == '__main__':
    app.run(host=HOST, port=PORT, debug=True, threaded=True)
