"""
Translation history routes
"""
from flask import Blueprint, jsonify


def create_history_blueprint(services):
    """Create and configure the history blueprint"""
    bp = Blueprint('history', __name__)

    @bp.route('/api/history', methods=['GET'])
    def list_history():
        """Newest first, at most HISTORY_MAX_ITEMS entries"""
        entries = services.history.list()
        return jsonify({"history": [entry.to_dict() for entry in entries]})

    @bp.route('/api/history/<int:entry_id>', methods=['GET'])
    def get_history_entry(entry_id):
        entry = services.history.get(entry_id)
        if entry is None:
            return jsonify({"error": "History entry not found"}), 404
        return jsonify(entry.to_dict())

    @bp.route('/api/history', methods=['DELETE'])
    def clear_history():
        removed = services.history.clear()
        return jsonify({"removed": removed})

    return bp
