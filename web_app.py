#!/usr/bin/env python3
"""
Web Frontend for the Resonance Optimizer
Exposes the optimization showcase state machine as a JSON API with live
progress over Socket.IO
"""

from flask import Flask, request, jsonify
from flask_socketio import SocketIO, emit
import os
import sys
import logging
import threading
from datetime import datetime
import uuid

# Add the project root to path
sys.path.insert(0, os.path.dirname(__file__))

from resonance_optimizer.core.config import OptimizerSettings, configure_logging
from resonance_optimizer.core.difficulty import list_problems
from resonance_optimizer.core.errors import (
    ConfigurationLookupError, GenerationError, OrchestratorStateError, RemoteSolveError,
    SolveInProgressError,
)
from resonance_optimizer.core.orchestrator import OptimizationOrchestrator

logger = logging.getLogger(__name__)


def build_orchestrator():
    """Default factory: one orchestrator per browser session, configured from the environment."""
    return OptimizationOrchestrator(settings=OptimizerSettings.from_env())


app = Flask(__name__)
app.config['SECRET_KEY'] = os.urandom(24)
app.config['ORCHESTRATOR_FACTORY'] = build_orchestrator

socketio = SocketIO(app, cors_allowed_origins="*")

# Store active sessions
active_sessions = {}


class ProgressCallback:
    """Orchestrator listener that relays state and progress to the frontend"""

    def __init__(self, session_id, socketio_instance):
        self.session_id = session_id
        self.socketio = socketio_instance

    def __call__(self, event, view_model):
        if event == 'progress':
            self.emit_progress(view_model.optimization_progress)
        else:
            self.socketio.emit('state_changed', {
                'session_id': self.session_id,
                'event': event,
                'state': view_model.state.value,
                'is_optimizing': view_model.is_optimizing,
            })

    def emit_progress(self, progress, message=""):
        """Emit progress update to frontend"""
        self.socketio.emit('progress_update', {
            'session_id': self.session_id,
            'progress': round(progress, 2),
            'message': message
        })

    def emit_log(self, message, level="info"):
        """Emit log message to frontend"""
        self.socketio.emit('log_message', {
            'session_id': self.session_id,
            'message': message,
            'level': level,
            'timestamp': datetime.now().isoformat()
        })


def _error_response(e):
    """Map engine errors onto HTTP statuses"""
    if isinstance(e, (ConfigurationLookupError, GenerationError, ValueError, TypeError)):
        status = 400
    elif isinstance(e, (SolveInProgressError, OrchestratorStateError)):
        status = 409
    elif isinstance(e, RemoteSolveError):
        status = 502
    else:
        logger.exception("Unhandled error")
        status = 500
    return jsonify({'error': str(e)}), status


def _get_session(session_id):
    return active_sessions.get(session_id)


def _session_not_found():
    return jsonify({'error': 'Session not found'}), 404


@app.route('/')
def index():
    """Service index"""
    return jsonify({
        'service': 'resonance-optimizer',
        'problems': [problem.id for problem in list_problems()],
        'active_sessions': len(active_sessions),
    })


@app.route('/api/problems')
def get_problems():
    """Problem gallery with every difficulty preset"""
    return jsonify({'problems': [problem.to_dict() for problem in list_problems()]})


@app.route('/api/session', methods=['POST'])
def create_session():
    """Create an optimizer session, optionally selecting a problem right away"""
    try:
        data = request.get_json(silent=True) or {}
        session_id = str(uuid.uuid4())

        orchestrator = app.config['ORCHESTRATOR_FACTORY']()
        callback = ProgressCallback(session_id, socketio)
        orchestrator.add_listener(callback)

        status = 'idle'
        if data.get('problem_id'):
            try:
                orchestrator.select_problem(data['problem_id'], level=data.get('level'), seed=data.get('seed'))
            except Exception:
                orchestrator.close()
                raise
            status = 'ready'

        active_sessions[session_id] = {
            'orchestrator': orchestrator,
            'callback': callback,
            'status': status,
            'created_at': datetime.now().isoformat()
        }

        return jsonify({
            'session_id': session_id,
            'view_model': orchestrator.view_model().to_dict()
        }), 201

    except Exception as e:
        return _error_response(e)


@app.route('/api/session/<session_id>')
def get_session(session_id):
    """Current view-model of a session"""
    session_data = _get_session(session_id)
    if session_data is None:
        return _session_not_found()

    return jsonify({
        'session_id': session_id,
        'status': session_data['status'],
        'created_at': session_data['created_at'],
        'view_model': session_data['orchestrator'].view_model().to_dict()
    })


@app.route('/api/session/<session_id>', methods=['DELETE'])
def delete_session(session_id):
    """Reset and forget a session"""
    session_data = active_sessions.pop(session_id, None)
    if session_data is None:
        return _session_not_found()

    session_data['orchestrator'].close()
    return jsonify({'success': True})


@app.route('/api/session/<session_id>/problem', methods=['POST'])
def select_problem(session_id):
    """Select a problem; regenerates the instance at the problem's default level"""
    session_data = _get_session(session_id)
    if session_data is None:
        return _session_not_found()

    try:
        data = request.get_json(silent=True) or {}
        problem_id = data.get('problem_id')
        if not problem_id:
            return jsonify({'error': 'problem_id is required'}), 400

        view_model = session_data['orchestrator'].select_problem(
            problem_id, level=data.get('level'), seed=data.get('seed'))
        session_data['status'] = 'ready'
        return jsonify({'view_model': view_model.to_dict()})

    except Exception as e:
        return _error_response(e)


@app.route('/api/session/<session_id>/difficulty', methods=['POST'])
def set_difficulty(session_id):
    """Change difficulty level"""
    session_data = _get_session(session_id)
    if session_data is None:
        return _session_not_found()

    try:
        data = request.get_json(silent=True) or {}
        level = data.get('level')
        if not level:
            return jsonify({'error': 'level is required'}), 400

        view_model = session_data['orchestrator'].set_difficulty(level)
        return jsonify({'view_model': view_model.to_dict()})

    except Exception as e:
        return _error_response(e)


@app.route('/api/session/<session_id>/parameters', methods=['POST'])
def set_parameters(session_id):
    """Override generation parameters of the current difficulty"""
    session_data = _get_session(session_id)
    if session_data is None:
        return _session_not_found()

    try:
        data = request.get_json(silent=True) or {}
        if not isinstance(data, dict) or not data:
            return jsonify({'error': 'At least one parameter is required'}), 400

        view_model = session_data['orchestrator'].set_parameters(**data)
        return jsonify({'view_model': view_model.to_dict()})

    except Exception as e:
        return _error_response(e)


@app.route('/api/session/<session_id>/regenerate', methods=['POST'])
def regenerate_instance(session_id):
    """New problem instance; pass a seed to rebuild a previous one"""
    session_data = _get_session(session_id)
    if session_data is None:
        return _session_not_found()

    try:
        data = request.get_json(silent=True) or {}
        view_model = session_data['orchestrator'].regenerate_instance(seed=data.get('seed'))
        return jsonify({'view_model': view_model.to_dict()})

    except Exception as e:
        return _error_response(e)


@app.route('/api/session/<session_id>/solve', methods=['POST'])
def solve_problem(session_id):
    """Start the solver, in a background thread unless background is false"""
    session_data = _get_session(session_id)
    if session_data is None:
        return _session_not_found()

    try:
        data = request.get_json(silent=True) or {}
        orchestrator = session_data['orchestrator']

        if data.get('background', True):
            # Claim the solver before answering 202
            ticket = orchestrator.begin_solve()
            session_data['status'] = 'running'
            thread = threading.Thread(
                target=run_solver,
                args=(session_id, session_data, ticket)
            )
            thread.daemon = True
            thread.start()

            return jsonify({
                'success': True,
                'message': 'Solver started'
            }), 202

        outcome = orchestrator.solve()
        session_data['status'] = 'completed'
        return jsonify({
            'success': True,
            'outcome': outcome.to_dict() if outcome else None,
            'view_model': orchestrator.view_model().to_dict()
        })

    except Exception as e:
        return _error_response(e)


def run_solver(session_id, session_data, ticket):
    """Run a claimed solve and emit the result"""
    callback = session_data['callback']
    orchestrator = session_data['orchestrator']

    try:
        callback.emit_log("Starting optimization...", "info")
        outcome = orchestrator.run_solve(ticket)

        if outcome is None:
            callback.emit_log("Result discarded: the problem changed while solving", "warning")
            session_data['status'] = 'ready'
            return

        if outcome.recovered:
            callback.emit_log("Solver unavailable, showing a fallback answer", "warning")

        socketio.emit('solver_complete', {
            'session_id': session_id,
            'success': True,
            'outcome': outcome.to_dict(),
            'view_model': orchestrator.view_model().to_dict()
        })
        callback.emit_log("Optimization complete!", "success")
        session_data['status'] = 'completed'

    except Exception as e:
        logger.exception("Solve failed for session %s", session_id)
        callback.emit_log(f"Error: {str(e)}", "error")
        socketio.emit('solver_error', {
            'session_id': session_id,
            'error': str(e)
        })
        session_data['status'] = 'error'


@socketio.on('connect')
def handle_connect():
    """Handle client connection"""
    logger.info("Client connected: %s", request.sid)
    emit('connected', {'message': 'Connected to optimizer server'})


@socketio.on('disconnect')
def handle_disconnect():
    """Handle client disconnection"""
    logger.info("Client disconnected: %s", request.sid)


if __name__ == '__main__':
    settings = OptimizerSettings.from_env()
    configure_logging(settings.log_level)

    print("=" * 70)
    print("Resonance Optimizer - Web Interface")
    print("=" * 70)
    print(f"\nSolver API: {settings.api_base_url}")
    print(f"On solve error: {settings.on_solve_error}")
    print("\nAccess the application at: http://localhost:5000")
    print("\nPress Ctrl+C to stop the server")
    print("=" * 70)

    socketio.run(app, debug=True, host='0.0.0.0', port=5000, allow_unsafe_werkzeug=True)
