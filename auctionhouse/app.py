"""HTTP application wiring and the command that serves it."""

from __future__ import annotations

import argparse
import json
import sys
from http import HTTPStatus
from pathlib import Path

from dotenv import load_dotenv
from flask import Flask, Response, request
from pymongo.errors import PyMongoError

from .auction_repository import AuctionRepository
from .auction_usecase import AuctionUseCase
from .bid_repository import BidRepository
from .bid_usecase import BidUseCase
from .controllers import AuctionController, BidController, Reply, UserController
from .database import connect_from_env
from .user_repository import UserRepository
from .user_usecase import UserUseCase

DEFAULT_ENV_FILE = ".env"
DEFAULT_HOST = "0.0.0.0"
DEFAULT_PORT = 8080
_JSON_TYPE = "application/json; charset=utf-8"


def _respond(reply: Reply) -> Response:
    status, body = reply
    if status == HTTPStatus.CREATED:
        return Response(status=status)
    return Response(json.dumps(body), status=status, content_type=_JSON_TYPE)


def create_app(
    auction_controller: AuctionController,
    bid_controller: BidController,
    user_controller: UserController,
) -> Flask:
    """Build the Flask application routing requests to the controllers."""
    app = Flask(__name__)

    @app.get("/auction")
    def find_auctions() -> Response:
        return _respond(
            auction_controller.find_auctions(
                request.args.get("status", ""),
                request.args.get("category", ""),
                request.args.get("productName", ""),
            )
        )

    @app.get("/auction/<auction_id>")
    def find_auction_by_id(auction_id: str) -> Response:
        return _respond(auction_controller.find_auction_by_id(auction_id))

    @app.post("/auction")
    def create_auction() -> Response:
        return _respond(auction_controller.create_auction(request.get_data()))

    @app.get("/auction/winner/<auction_id>")
    def find_winning_bid(auction_id: str) -> Response:
        return _respond(auction_controller.find_winning_bid_by_auction_id(auction_id))

    @app.post("/bid")
    def create_bid() -> Response:
        return _respond(bid_controller.create_bid(request.get_data()))

    @app.get("/bid/<auction_id>")
    def find_bids(auction_id: str) -> Response:
        return _respond(bid_controller.find_bid_by_auction_id(auction_id))

    @app.get("/user/<user_id>")
    def find_user(user_id: str) -> Response:
        return _respond(user_controller.find_user_by_id(user_id))

    return app


def build_controllers(database) -> tuple[AuctionController, BidController, UserController]:
    """Wire repositories and use cases over ``database``; returns auction, bid and user controllers."""
    auction_repository = AuctionRepository(database)
    bid_repository = BidRepository(database, auction_repository)
    user_repository = UserRepository(database)

    auction_controller = AuctionController(AuctionUseCase(auction_repository, bid_repository))
    bid_controller = BidController(BidUseCase(bid_repository))
    user_controller = UserController(UserUseCase(user_repository))
    return auction_controller, bid_controller, user_controller


def main(argv: list[str] | None = None) -> int:
    """Load settings, connect to the database and serve the HTTP API."""
    parser = argparse.ArgumentParser(prog="auctionhouse", description="Run the auction HTTP API.")
    parser.add_argument("--env-file", default=DEFAULT_ENV_FILE, help="file of environment settings")
    parser.add_argument("--host", default=DEFAULT_HOST, help="address to listen on")
    parser.add_argument("--port", type=int, default=DEFAULT_PORT, help="port to listen on")
    args = parser.parse_args(argv)

    env_file = Path(args.env_file)
    try:
        if not env_file.is_file():
            raise FileNotFoundError(str(env_file))
        load_dotenv(env_file)
    except OSError:
        print("Error trying to load env variables", file=sys.stderr)
        return 1

    try:
        database = connect_from_env()
    except PyMongoError as exc:
        print(str(exc), file=sys.stderr)
        return 1

    app = create_app(*build_controllers(database))
    app.run(host=args.host, port=args.port)
    return 0