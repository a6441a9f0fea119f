import json
import uuid
from datetime import datetime, timedelta, timezone

import pytest

from auctionhouse.auction_usecase import AuctionInput, AuctionOutput, WinningInfoOutput
from auctionhouse.bid_usecase import BidInput, BidOutput, BidUseCase
from auctionhouse.controllers import AuctionController, BidController, UserController
from auctionhouse.errors import BadRequestError, InternalServerError, NotFoundError
from auctionhouse.user_usecase import UserOutput

STAMP = datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc)


def _auction_output(auction_id):
    return AuctionOutput(
        id=auction_id,
        product_name="Laptop",
        category="Electronics",
        description="A well kept laptop",
        condition=1,
        status=0,
        timestamp=STAMP,
    )


def _bid_output(auction_id):
    return BidOutput(
        id=str(uuid.uuid4()),
        user_id=str(uuid.uuid4()),
        auction_id=auction_id,
        amount=150.0,
        timestamp=STAMP,
    )


class FakeAuctionUseCase:
    def __init__(self, error=None, auctions=(), bid=None):
        self.error = error
        self.auctions = list(auctions)
        self.bid = bid
        self.calls = []

    def _record(self, name, *args):
        self.calls.append((name, args))
        if self.error is not None:
            raise self.error

    def create_auction(self, auction_input):
        self._record("create", auction_input)

    def find_auction_by_id(self, auction_id):
        self._record("find", auction_id)
        return _auction_output(auction_id)

    def find_auctions(self, status, category, product_name):
        self._record("list", status, category, product_name)
        return self.auctions

    def find_winning_bid_by_auction_id(self, auction_id):
        self._record("winner", auction_id)
        return WinningInfoOutput(auction=_auction_output(auction_id), bid=self.bid)


class FakeBidUseCase:
    def __init__(self, bids=(), error=None):
        self.bids = list(bids)
        self.error = error
        self.created = []

    def create_bid(self, bid_input):
        if self.error is not None:
            raise self.error
        self.created.append(bid_input)

    def find_bid_by_auction_id(self, auction_id):
        if self.error is not None:
            raise self.error
        return self.bids


class FakeUserUseCase:
    def __init__(self, error=None):
        self.error = error

    def find_user_by_id(self, user_id):
        if self.error is not None:
            raise self.error
        return UserOutput(id=user_id, name="Ada")


class NullBidRepository:
    def create_bid(self, bids):
        pass


AUCTION_BODY = json.dumps(
    {
        "product_name": "Laptop",
        "category": "Electronics",
        "description": "A well kept laptop with charger",
        "condition": 2,
    }
)


def test_create_auction_passes_input_to_use_case():
    use_case = FakeAuctionUseCase()
    status, body = AuctionController(use_case).create_auction(AUCTION_BODY)
    assert (status, body) == (201, None)
    assert use_case.calls == [
        (
            "create",
            (AuctionInput("Laptop", "Electronics", "A well kept laptop with charger", 2),),
        )
    ]


def test_create_auction_with_invalid_body_skips_use_case():
    use_case = FakeAuctionUseCase()
    status, body = AuctionController(use_case).create_auction("{}")
    assert status == 400
    assert body["message"] == "Invalid field values"
    assert use_case.calls == []


def test_create_auction_reports_use_case_errors():
    use_case = FakeAuctionUseCase(error=BadRequestError("invalid auction object"))
    status, body = AuctionController(use_case).create_auction(AUCTION_BODY)
    assert status == 400
    assert body == {
        "message": "invalid auction object",
        "err": "bad_request",
        "code": 400,
        "causes": None,
    }


def test_find_auction_rejects_invalid_uuid():
    use_case = FakeAuctionUseCase()
    status, body = AuctionController(use_case).find_auction_by_id("not-a-uuid")
    assert status == 400
    assert body["causes"] == [{"field": "auctionId", "message": "Invalid UUID value"}]
    assert use_case.calls == []


def test_find_auction_returns_output():
    auction_id = str(uuid.uuid4())
    status, body = AuctionController(FakeAuctionUseCase()).find_auction_by_id(auction_id)
    assert status == 200
    assert body == _auction_output(auction_id).to_dict()


def test_find_auction_maps_internal_errors():
    use_case = FakeAuctionUseCase(error=InternalServerError("Error trying to find auction by id"))
    status, body = AuctionController(use_case).find_auction_by_id(str(uuid.uuid4()))
    assert status == 500
    assert body["err"] == "internal_server"


@pytest.mark.parametrize("status", [None, "", "abc", "1.5"])
def test_find_auctions_requires_numeric_status(status):
    use_case = FakeAuctionUseCase()
    code, body = AuctionController(use_case).find_auctions(status, "", "")
    assert code == 400
    assert body["message"] == "Error trying to validate auction status param"
    assert use_case.calls == []


def test_find_auctions_passes_filters():
    auction_id = str(uuid.uuid4())
    use_case = FakeAuctionUseCase(auctions=[_auction_output(auction_id)])
    code, body = AuctionController(use_case).find_auctions("1", "Electronics", "lap")
    assert code == 200
    assert body == [_auction_output(auction_id).to_dict()]
    assert use_case.calls == [("list", (1, "Electronics", "lap"))]


def test_find_auctions_without_results_is_null():
    code, body = AuctionController(FakeAuctionUseCase()).find_auctions("0", None, None)
    assert (code, body) == (200, None)


def test_winning_bid_includes_bid():
    auction_id = str(uuid.uuid4())
    bid = _bid_output(auction_id)
    code, body = AuctionController(FakeAuctionUseCase(bid=bid)).find_winning_bid_by_auction_id(auction_id)
    assert code == 200
    assert body["bid"] == bid.to_dict()
    assert body["auction"]["id"] == auction_id


def test_winning_bid_rejects_invalid_uuid():
    code, body = AuctionController(FakeAuctionUseCase()).find_winning_bid_by_auction_id("x")
    assert code == 400
    assert body["causes"][0]["field"] == "auctionId"


def test_create_bid_passes_input_to_use_case():
    use_case = FakeBidUseCase()
    payload = json.dumps({"user_id": "u", "auction_id": "a", "amount": 5})
    assert BidController(use_case).create_bid(payload) == (201, None)
    assert use_case.created == [BidInput("u", "a", 5.0)]


def test_create_bid_with_type_error():
    use_case = FakeBidUseCase()
    code, body = BidController(use_case).create_bid('{"amount": "lots"}')
    assert code == 404
    assert body["message"] == "Invalid type error"
    assert use_case.created == []


def test_create_bid_reports_entity_validation():
    with BidUseCase(NullBidRepository(), 5, timedelta(minutes=3)) as use_case:
        payload = json.dumps({"user_id": "bad", "auction_id": str(uuid.uuid4()), "amount": 5})
        code, body = BidController(use_case).create_bid(payload)
    assert code == 400
    assert body["message"] == "UserId is not a valid id"


def test_find_bids_returns_list():
    auction_id = str(uuid.uuid4())
    bid = _bid_output(auction_id)
    code, body = BidController(FakeBidUseCase(bids=[bid])).find_bid_by_auction_id(auction_id)
    assert code == 200
    assert body == [bid.to_dict()]


def test_find_bids_without_results_is_null():
    assert BidController(FakeBidUseCase()).find_bid_by_auction_id(str(uuid.uuid4())) == (200, None)


def test_find_bids_rejects_invalid_uuid():
    code, body = BidController(FakeBidUseCase()).find_bid_by_auction_id("nope")
    assert code == 400
    assert body["message"] == "Invalid fields"


def test_find_user_returns_output():
    user_id = str(uuid.uuid4())
    code, body = UserController(FakeUserUseCase()).find_user_by_id(user_id)
    assert code == 200
    assert body == {"id": user_id, "name": "Ada"}


def test_find_user_rejects_invalid_uuid():
    code, body = UserController(FakeUserUseCase()).find_user_by_id("123")
    assert code == 400
    assert body["causes"] == [{"field": "userId", "message": "Invalid UUID value"}]


def test_find_user_not_found():
    use_case = FakeUserUseCase(error=NotFoundError("User not found"))
    code, body = UserController(use_case).find_user_by_id(str(uuid.uuid4()))
    assert code == 404
    assert body["err"] == "not_found"