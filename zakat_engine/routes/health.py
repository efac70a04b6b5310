"""Health check endpoint."""
import sqlite3
from flask import Blueprint, current_app, jsonify

from zakat_engine.db import get_db

health_bp = Blueprint('health', __name__)


@health_bp.route('/healthz')
def healthz():
    """Return health status of the application and its state store."""
    try:
        get_db().execute('SELECT 1 FROM state_store LIMIT 1').fetchall()
    except sqlite3.Error as e:
        current_app.logger.error(f"State store check failed: {e}")
        return jsonify({'status': 'error', 'error': 'state store unavailable'}), 503
    return jsonify({'status': 'ok'})
