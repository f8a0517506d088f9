"""
HTTP server exposing the game service.
"""

from typing import Any, Dict, Optional
from flask import Flask, jsonify, request

from ..core import GameError, ValidationError
from ..service import GameService


def _ok(result: Any = None, status: int = 200):
    return jsonify({"ok": True, "result": result}), status


def _body() -> Dict[str, Any]:
    return request.get_json(silent=True) or {}


def _int_field(body: Dict[str, Any], key: str, required: bool = True) -> Optional[int]:
    value = body.get(key)
    if value is None:
        if required:
            raise ValidationError(f"Missing field: {key}")
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"Field {key} must be an integer.")


class GameServer:
    """Web server for the round engine and the lobby."""

    def __init__(self, service: Optional[GameService] = None, port: int = 5000, host: str = '127.0.0.1'):
        self.port = port
        self.host = host
        self.service = service or GameService()
        self.app = Flask(__name__)

        self._setup_error_handlers()
        self._setup_lobby_routes()
        self._setup_game_routes()

    def _setup_error_handlers(self):
        @self.app.errorhandler(GameError)
        def handle_game_error(error: GameError):
            payload = {"ok": False}
            payload.update(error.to_dict())
            return jsonify(payload), error.status_code

    def _setup_lobby_routes(self):
        """Room lifecycle routes."""
        service = self.service

        @self.app.route('/lobby', methods=['GET'])
        def lobby():
            return _ok([room.to_dict() for room in service.rooms.list_rooms()])

        @self.app.route('/rooms/user/<int:user_id>', methods=['POST'])
        def create_room(user_id: int):
            body = _body()
            room = service.rooms.create_room(
                user_id,
                body.get("nickname", f"player_{user_id}"),
                body.get("title", "Saboteur room"),
                password=body.get("roomPwd", ""),
                max_players=_int_field(body, "maxPlayer", required=False),
            )
            return _ok(room.to_dict(), 201)

        @self.app.route('/rooms/<int:room_id>/enter/<int:user_id>', methods=['PUT'])
        def enter_room(room_id: int, user_id: int):
            body = _body()
            player = service.rooms.enter_room(
                room_id, user_id, body.get("nickname", f"player_{user_id}"), body.get("roomPwd", "")
            )
            return _ok(player.player_id)

        @self.app.route('/rooms/<int:room_id>/out/<int:user_id>', methods=['PATCH'])
        def exit_room(room_id: int, user_id: int):
            return _ok({"newHost": service.rooms.exit_room(room_id, user_id)})

        @self.app.route('/rooms/<int:room_id>/ready/<int:user_id>', methods=['PATCH'])
        def ready(room_id: int, user_id: int):
            ready_flag = bool(_body().get("isReady", True))
            player = service.rooms.set_ready(room_id, user_id, ready_flag)
            return _ok(player.to_dict(reveal_role=False))

        @self.app.route('/rooms/<int:room_id>/ai', methods=['PUT'])
        def fill_with_ai(room_id: int):
            added = service.rooms.fill_with_ai(room_id)
            return _ok([p.to_dict(reveal_role=False) for p in added])

        @self.app.route('/rooms/<int:room_id>/changeMaxPlayer', methods=['PATCH'])
        def change_max_player(room_id: int):
            room = service.rooms.change_max_players(room_id, _int_field(_body(), "maxPlayer"))
            return _ok(room.to_dict())

        @self.app.route('/rooms/<int:room_id>/start/<int:user_id>', methods=['PATCH'])
        def start(room_id: int, user_id: int):
            return _ok(service.rooms.start_game(room_id, user_id))

        @self.app.route('/rooms/<int:room_id>', methods=['DELETE'])
        def delete_game(room_id: int):
            service.rooms.delete_game(room_id)
            return _ok()

    def _setup_game_routes(self):
        """Round state machine routes."""
        service = self.service

        @self.app.route('/rooms/<int:room_id>/role', methods=['PATCH'])
        def assign_roles(room_id: int):
            assignments = service.assign_roles(room_id)
            return _ok([{"playerId": pid, "role": role.value} for pid, role in assignments])

        @self.app.route('/rooms/<int:room_id>/protect', methods=['PATCH'])
        def protect(room_id: int):
            body = _body()
            message = service.protect(
                room_id, _int_field(body, "actorId", False), _int_field(body, "targetId", False)
            )
            return _ok(message)

        @self.app.route('/rooms/<int:room_id>/eliminate', methods=['PATCH'])
        def eliminate(room_id: int):
            body = _body()
            message = service.eliminate(
                room_id, _int_field(body, "actorId", False), _int_field(body, "targetId", False)
            )
            return _ok(message)

        @self.app.route('/rooms/<int:room_id>/investigate/<int:actor_id>/<int:target_id>', methods=['GET'])
        def investigate(room_id: int, actor_id: int, target_id: int):
            return _ok(service.investigate(room_id, actor_id, target_id).to_dict())

        @self.app.route('/rooms/<int:room_id>/isZeroVote', methods=['GET'])
        def has_votes(room_id: int):
            return _ok(service.has_votes(room_id))

        @self.app.route('/rooms/<int:room_id>/rounds/<int:round_no>/votes', methods=['POST'])
        def cast_vote(room_id: int, round_no: int):
            body = _body()
            ballot = service.cast_vote(
                room_id, round_no, _int_field(body, "voterId"), _int_field(body, "candidateId")
            )
            return _ok(ballot.to_dict(), 201)

        @self.app.route('/rooms/<int:room_id>/rounds/<int:round_no>/users/<int:user_id>/pad', methods=['PUT'])
        def pad_and_auto_vote(room_id: int, round_no: int, user_id: int):
            return _ok(service.pad_and_auto_vote(room_id, round_no, user_id).to_dict())

        @self.app.route('/rooms/<int:room_id>/rounds/<int:round_no>/tally', methods=['POST'])
        def tally(room_id: int, round_no: int):
            return _ok(service.tally_votes(room_id, round_no).to_dict())

        @self.app.route('/rooms/<int:room_id>/users/<int:user_id>/result', methods=['GET'])
        def result(room_id: int, user_id: int):
            return _ok(service.evaluate_win(room_id, user_id).to_dict())

        @self.app.route('/rooms/<int:room_id>/roundNo', methods=['GET'])
        def round_no(room_id: int):
            return _ok(service.round_number(room_id))

        @self.app.route('/rooms/<int:room_id>/users', methods=['GET'])
        def users(room_id: int):
            # Roles of living players stay hidden from the public list
            return _ok([p.to_dict(reveal_role=not p.is_alive) for p in service.users(room_id)])

        @self.app.route('/rooms/<int:room_id>/users/<int:user_id>/info', methods=['GET'])
        def user_info(room_id: int, user_id: int):
            return _ok(service.user_info(room_id, user_id).to_dict())

        @self.app.route('/rooms/<int:room_id>/users/<int:user_id>/winner', methods=['GET'])
        def winners(room_id: int, user_id: int):
            return _ok([p.to_dict() for p in service.winners(room_id)])

    def start(self) -> None:
        """Start the web server."""
        print(f"\n{'='*60}")
        print(f"Starting web server on http://{self.host}:{self.port}")
        print(f"{'='*60}\n")
        self.app.run(host=self.host, port=self.port, debug=False, threaded=True)
