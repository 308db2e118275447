import logging

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import StreamingResponse
from redis.asyncio import Redis

from thegame.converter import DataConverter
from thegame.domain.game import Game
from thegame.load_secrets import game_ttl_hours, redis_host, redis_port
from thegame.models.dc_models import (
    CreateGameModel,
    GameEndedModel,
    GameStateModel,
    JoinGameModel,
    PilePreferenceModel,
    PlayCardModel,
    PlayerActionModel,
    StartingPlayerModel,
)
from thegame.notifier import GameNotifier, RedisNotifier
from thegame.redis_subscriber import RedisSubscriber
from thegame.services.game_actions import GameActions
from thegame.services.game_store import GameStore
from thegame.services.result import ErrorCode, Result

redis = Redis(host=redis_host, port=redis_port, decode_responses=True, health_check_interval=30)

game_router = APIRouter()
data_converter = DataConverter()

STATUS_BY_ERROR_CODE = {
    ErrorCode.not_found: status.HTTP_404_NOT_FOUND,
    ErrorCode.precondition: status.HTTP_400_BAD_REQUEST,
    ErrorCode.illegal_move: status.HTTP_400_BAD_REQUEST,
    ErrorCode.store_error: status.HTTP_500_INTERNAL_SERVER_ERROR,
}

_sql_store = None


def get_game_store() -> GameStore:
    global _sql_store
    if _sql_store is None:
        # Imported here so the engine is only built when the DB store is used.
        from thegame.db import Session
        from thegame.services.game_db import SqlGameStore

        _sql_store = SqlGameStore(Session)
    return _sql_store


def get_game_actions(store: GameStore = Depends(get_game_store)) -> GameActions:
    return GameActions(store, ttl_seconds=game_ttl_hours * 3600)


def get_notifier() -> GameNotifier:
    return RedisNotifier(redis)


def unwrap(result: Result):
    if not result.is_success:
        raise HTTPException(status_code=STATUS_BY_ERROR_CODE[result.code], detail=result.error)
    return result.value


async def publish(notifier: GameNotifier, game: Game) -> GameStateModel:
    """Broadcast the new state. The action is already saved, so a failed publish is only logged."""
    state = data_converter.convert_game_to_statemodel(game)
    try:
        await notifier.broadcast(game.id, state.model_dump(mode="json"))
    except Exception as e:
        logging.warning(f"Failed to broadcast game {game.id}: {e}")
    return state


class GameServer:
    @staticmethod
    @game_router.post("/games", response_model=GameStateModel)
    async def create_game(
        request: CreateGameModel,
        actions: GameActions = Depends(get_game_actions),
        notifier: GameNotifier = Depends(get_notifier),
    ) -> GameStateModel:
        result = await actions.create_game(request.player_name, request.player_id, request.difficulty)
        return await publish(notifier, unwrap(result))

    @staticmethod
    @game_router.post("/games/{game_id}/join", response_model=GameStateModel)
    async def join_game(
        game_id: str,
        request: JoinGameModel,
        actions: GameActions = Depends(get_game_actions),
        notifier: GameNotifier = Depends(get_notifier),
    ) -> GameStateModel:
        result = await actions.join_game(game_id, request.player_name, request.player_id)
        return await publish(notifier, unwrap(result))

    @staticmethod
    @game_router.post("/games/{game_id}/play-card", response_model=GameStateModel)
    async def play_card(
        game_id: str,
        request: PlayCardModel,
        actions: GameActions = Depends(get_game_actions),
        notifier: GameNotifier = Depends(get_notifier),
    ) -> GameStateModel:
        card = data_converter.convert_cardmodel_to_card(request.card)
        result = await actions.play_card(game_id, request.player_id, card, request.pile_id)
        return await publish(notifier, unwrap(result))

    @staticmethod
    @game_router.post("/games/{game_id}/end-turn", response_model=GameStateModel)
    async def end_turn(
        game_id: str,
        request: PlayerActionModel,
        actions: GameActions = Depends(get_game_actions),
        notifier: GameNotifier = Depends(get_notifier),
    ) -> GameStateModel:
        result = await actions.end_turn(game_id, request.player_id)
        return await publish(notifier, unwrap(result))

    @staticmethod
    @game_router.post("/games/{game_id}/pile-preference", response_model=GameStateModel)
    async def mark_pile_preference(
        game_id: str,
        request: PilePreferenceModel,
        actions: GameActions = Depends(get_game_actions),
        notifier: GameNotifier = Depends(get_notifier),
    ) -> GameStateModel:
        result = await actions.mark_pile_preference(game_id, request.player_id, request.pile_id)
        return await publish(notifier, unwrap(result))

    @staticmethod
    @game_router.post("/games/{game_id}/starting-player", response_model=GameStateModel)
    async def set_starting_player(
        game_id: str,
        request: StartingPlayerModel,
        actions: GameActions = Depends(get_game_actions),
        notifier: GameNotifier = Depends(get_notifier),
    ) -> GameStateModel:
        result = await actions.set_starting_player(
            game_id, request.player_id, request.starting_player_id
        )
        return await publish(notifier, unwrap(result))

    @staticmethod
    @game_router.post("/games/{game_id}/restart", response_model=GameStateModel)
    async def restart_game(
        game_id: str,
        request: PlayerActionModel,
        actions: GameActions = Depends(get_game_actions),
        notifier: GameNotifier = Depends(get_notifier),
    ) -> GameStateModel:
        result = await actions.restart_game(game_id, request.player_id)
        return await publish(notifier, unwrap(result))

    @staticmethod
    @game_router.delete("/games/{game_id}", response_model=GameEndedModel)
    async def end_game(
        game_id: str,
        player_id: str,
        actions: GameActions = Depends(get_game_actions),
        notifier: GameNotifier = Depends(get_notifier),
    ) -> GameEndedModel:
        ended = GameEndedModel(game_id=unwrap(await actions.end_game(game_id, player_id)))
        try:
            await notifier.broadcast(game_id, ended.model_dump())
        except Exception as e:
            logging.warning(f"Failed to broadcast end of game {game_id}: {e}")
        return ended

    @staticmethod
    @game_router.get("/games/{game_id}", response_model=GameStateModel)
    async def sync_game(
        game_id: str,
        actions: GameActions = Depends(get_game_actions),
        notifier: GameNotifier = Depends(get_notifier),
    ) -> GameStateModel:
        stored = unwrap(await actions.load_game(game_id))
        game = unwrap(await actions.sync_game(game_id))
        # Sync only ever finishes a game; unchanged states are not rebroadcast.
        if game.status != stored.status:
            return await publish(notifier, game)
        return data_converter.convert_game_to_statemodel(game)

    @staticmethod
    @game_router.get("/stream/{game_id}")
    async def stream_game(game_id: str, store: GameStore = Depends(get_game_store)):
        redis_subscriber = RedisSubscriber(store, game_id)

        return StreamingResponse(
            redis_subscriber.event_generator(redis),
            media_type="text/event-stream; charset=utf-8",
            headers={"Cache-Control": "no-cache", "Connection": "keep-alive"},
        )
