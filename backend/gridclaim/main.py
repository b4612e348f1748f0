from flask import Blueprint, current_app, jsonify

from gridclaim import ENGINE_EXTENSION

main = Blueprint('main', __name__)


@main.route('/')
def index():
    return jsonify({'message': 'Welcome to the grid claim game server!'})


@main.route('/api/state')
def state():
    engine = current_app.extensions[ENGINE_EXTENSION]
    return jsonify(engine.snapshot())
