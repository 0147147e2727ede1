from __future__ import annotations

from enum import StrEnum
from typing import TYPE_CHECKING, Annotated, Any, Literal

from pydantic import AliasChoices, BaseModel, Field, TypeAdapter, field_validator

from connect4.logic.board import COLUMNS, to_wire
from connect4.logic.enums import PlayerMark

if TYPE_CHECKING:
    from connect4.session.models import Match

_MAX_GAME_ID_LENGTH = 64


class ClientMessageType(StrEnum):
    REGISTER = "register"
    CREATE_GAME = "create_game"
    JOIN_GAME = "join_game"
    MAKE_MOVE = "make_move"


class ServerMessageType(StrEnum):
    USER_ID = "user_id"
    SUCCESS = "success"
    ERROR = "error"
    GAME_UPDATE = "game_update"
    CURRENT_PLAYER = "current_player"
    PLAYER_DISCONNECTED = "player_disconnected"


# ---------------------------------------------------------------------------
# Inbound
# ---------------------------------------------------------------------------


class _GameReferenceMessage(BaseModel):
    game_id: str = Field(
        min_length=1,
        max_length=_MAX_GAME_ID_LENGTH,
        validation_alias=AliasChoices("gameId", "game_id"),
    )

    @field_validator("game_id", mode="before")
    @classmethod
    def _coerce_game_id(cls, v: Any) -> Any:  # noqa: ANN401
        """Accept numeric game ids from clients that send them as numbers."""
        if isinstance(v, int) and not isinstance(v, bool):
            return str(v)
        return v


class RegisterMessage(BaseModel):
    """Legacy handshake message; identity is assigned on connect, so it carries nothing."""

    type: Literal[ClientMessageType.REGISTER] = ClientMessageType.REGISTER


class CreateGameMessage(BaseModel):
    type: Literal[ClientMessageType.CREATE_GAME] = ClientMessageType.CREATE_GAME


class JoinGameMessage(_GameReferenceMessage):
    type: Literal[ClientMessageType.JOIN_GAME] = ClientMessageType.JOIN_GAME


class MakeMoveMessage(_GameReferenceMessage):
    type: Literal[ClientMessageType.MAKE_MOVE] = ClientMessageType.MAKE_MOVE
    column: int = Field(ge=0, lt=COLUMNS, validation_alias=AliasChoices("column", "col"))


ClientMessage = RegisterMessage | CreateGameMessage | JoinGameMessage | MakeMoveMessage

_client_message_adapter = TypeAdapter(Annotated[ClientMessage, Field(discriminator="type")])


def parse_client_message(data: dict[str, Any]) -> ClientMessage:
    """Parse a raw dict into a typed ClientMessage.

    Raises pydantic.ValidationError for unknown types and missing or
    invalid fields. Unknown extra fields (such as a client-sent userId)
    are ignored.
    """
    return _client_message_adapter.validate_python(data)


# ---------------------------------------------------------------------------
# Outbound
# ---------------------------------------------------------------------------


class _ServerMessage(BaseModel):
    def to_wire(self) -> dict[str, Any]:
        """Dump with wire (camelCase) field names and JSON-compatible values."""
        return self.model_dump(mode="json", by_alias=True)


class MatchSnapshot(BaseModel):
    """Full match state as seen by clients."""

    id: str
    players: list[str]
    board: list[list[str | None]]
    current_player: str | None = Field(serialization_alias="currentPlayer")

    @classmethod
    def from_match(cls, match: Match) -> MatchSnapshot:
        return cls(
            id=match.match_id,
            players=list(match.participants),
            board=to_wire(match.board),
            current_player=match.current_player,
        )


class UserIdMessage(_ServerMessage):
    type: Literal[ServerMessageType.USER_ID] = ServerMessageType.USER_ID
    id: str


class GameCreatedMessage(_ServerMessage):
    type: Literal[ServerMessageType.SUCCESS] = ServerMessageType.SUCCESS
    message: str = "Game created"
    game: MatchSnapshot


class GameJoinedMessage(_ServerMessage):
    type: Literal[ServerMessageType.SUCCESS] = ServerMessageType.SUCCESS
    message: str = "Game joined"
    game: MatchSnapshot
    playing: PlayerMark


class GameOverMessage(_ServerMessage):
    type: Literal[ServerMessageType.SUCCESS] = ServerMessageType.SUCCESS
    message: str = "Game over"
    winner: str | None
    draw: bool = False


class ErrorMessage(_ServerMessage):
    type: Literal[ServerMessageType.ERROR] = ServerMessageType.ERROR
    message: str


class GameUpdateMessage(_ServerMessage):
    type: Literal[ServerMessageType.GAME_UPDATE] = ServerMessageType.GAME_UPDATE
    game: MatchSnapshot


class CurrentPlayerMessage(_ServerMessage):
    type: Literal[ServerMessageType.CURRENT_PLAYER] = ServerMessageType.CURRENT_PLAYER
    is_your_turn: bool = Field(serialization_alias="isYourTurn")


class PlayerDisconnectedMessage(_ServerMessage):
    type: Literal[ServerMessageType.PLAYER_DISCONNECTED] = ServerMessageType.PLAYER_DISCONNECTED
    message: str

    @classmethod
    def for_participant(cls, participant_id: str) -> PlayerDisconnectedMessage:
        return cls(message=f"Player {participant_id} disconnected")
