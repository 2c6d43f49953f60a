"""Pytest configuration and fixtures for the cloud integration tests."""

from __future__ import annotations

from collections import Counter
import hashlib
import re
from typing import Any

import aiohttp
from aiohttp import web
from aiohttp.test_utils import TestServer
import pytest

HUB_SERIAL = "10088888"
HUB_PASSWORD = "api-key"
REALM = "MyEnergi Telemetry"
NONCE = "00206c600008ae8300085b947a4bc7e60fde598df17c99a08ca0df6b233967fe"
OPAQUE = "000000100000000100000000f72ea4230000565f576cb0b94ff6170cae32a33f"

PETCARE_USER = "owner@example.com"
PETCARE_PASSWORD = "secret"
PETCARE_TOKEN = "token-1"

_AUTH_PARAM = re.compile(r'(\w+)=(?:"([^"]*)"|([^,\s]*))')


def _md5(value: str) -> str:
    return hashlib.md5(value.encode()).hexdigest()


@pytest.fixture
def jstatus_payload() -> list[dict[str, Any]]:
    """A cgi-jstatus-* answer with one zappi, one harvi and one eddi."""
    return [
        {
            "eddi": [
                {
                    "sno": 20011111,
                    "dat": "01-12-2020",
                    "tim": "10:15:00",
                    "fwv": "3200S3.048",
                    "div": 1450,
                    "sta": 3,
                    "che": 2.5,
                    "tp1": 52.0,
                    "tp2": 127,
                }
            ]
        },
        {
            "zappi": [
                {
                    "sno": 16099999,
                    "dat": "01-12-2020",
                    "tim": "10:15:03",
                    "fwv": "3560S3.054",
                    "vol": 2384,
                    "frq": 50.02,
                    "pha": 1,
                    "lck": 16,
                    "zmo": 3,
                    "sta": 1,
                    "pst": "B2",
                    "cmt": 254,
                    "pri": 1,
                    "mgl": 100,
                    "grd": -1200,
                    "gen": 2100,
                    "che": 12.34,
                    "sbh": 14,
                    "sbm": 5,
                    "sbk": 10,
                    "ectt1": "Internal Load",
                    "ectp1": 0,
                    "ectt2": "Grid",
                    "ectp2": -1200,
                }
            ]
        },
        {
            "harvi": [
                {
                    "sno": 10422222,
                    "dat": "01-12-2020",
                    "tim": "10:15:01",
                    "fwv": "",
                    "ectt1": "Generation",
                    "ectp1": 2100,
                    "ect1p": 1,
                    "ectt2": "None",
                    "ect2p": 1,
                }
            ]
        },
        {"asn": "s18.myenergi.net", "fwv": "3401S3.051"},
    ]


class FakeMyEnergi:
    """In-process stand-in for a myenergi director answering with digest auth."""

    def __init__(self) -> None:
        self.responses: dict[str, Any] = {}
        self.statuses: dict[str, int] = {}
        self.raw_bodies: dict[str, str] = {}
        self.password = HUB_PASSWORD
        self.stale_answers = 0
        self.requests: Counter[str] = Counter()
        self.authorizations: list[dict[str, str]] = []
        self.app = web.Application()
        self.app.router.add_route("GET", "/{tail:.*}", self.handle)
        self.base_url = ""

    def _challenge(self, stale: bool = False) -> web.Response:
        header = (
            f'Digest realm="{REALM}",qop="auth",nonce="{NONCE}",'
            f'opaque="{OPAQUE}",Stale="{"true" if stale else "false"}",algorithm="MD5"'
        )
        return web.Response(status=401, headers={"WWW-Authenticate": header})

    def _authorized(self, request: web.Request, header: str) -> bool:
        params = {
            m.group(1): m.group(2) if m.group(2) is not None else m.group(3)
            for m in _AUTH_PARAM.finditer(header.partition(" ")[2])
        }
        self.authorizations.append(params)
        ha1 = _md5(f"{HUB_SERIAL}:{REALM}:{self.password}")
        ha2 = _md5(f"{request.method}:{params.get('uri')}")
        expected = _md5(
            f"{ha1}:{params.get('nonce')}:{params.get('nc')}:"
            f"{params.get('cnonce')}:{params.get('qop')}:{ha2}"
        )
        return params.get("response") == expected and params.get("uri") == request.path

    async def handle(self, request: web.Request) -> web.Response:
        path = request.path
        self.requests[path] += 1
        header = request.headers.get("Authorization")
        if header is None:
            return self._challenge()
        if self.stale_answers:
            self.stale_answers -= 1
            return self._challenge(stale=True)
        if not self._authorized(request, header):
            return self._challenge()
        if path in self.statuses:
            return web.Response(status=self.statuses[path], text="error")
        if path in self.raw_bodies:
            return web.Response(text=self.raw_bodies[path])
        if path not in self.responses:
            return web.Response(status=404, text="not found")
        return web.json_response(self.responses[path])

    @property
    def total_requests(self) -> int:
        return sum(self.requests.values())


class FakeSurePetcare:
    """In-process stand-in for the Sure Petcare API."""

    def __init__(self) -> None:
        self.password = PETCARE_PASSWORD
        self.valid_tokens = {PETCARE_TOKEN}
        self.issued_token = PETCARE_TOKEN
        self.start: dict[str, Any] = {"households": [], "pets": [], "devices": []}
        self.pet_positions: list[dict[str, Any]] = []
        self.posted_positions: list[tuple[int, dict[str, Any]]] = []
        self.position_answer: dict[str, Any] | None = None
        self.start_status: int | None = None
        self.login_status: int | None = None
        self.requests: Counter[str] = Counter()
        self.app = web.Application()
        self.app.router.add_post("/api/auth/login", self.login)
        self.app.router.add_get("/api/me/start", self.me_start)
        self.app.router.add_get("/api/pet", self.pets)
        self.app.router.add_post("/api/pet/{pet_id}/position", self.set_position)
        self.base_url = ""

    def _check(self, request: web.Request) -> bool:
        header = request.headers.get("Authorization", "")
        return header.startswith("Bearer ") and header[7:] in self.valid_tokens

    async def login(self, request: web.Request) -> web.Response:
        self.requests["login"] += 1
        if self.login_status is not None:
            return web.json_response({"error": "locked"}, status=self.login_status)
        body = await request.json()
        if body.get("email_address") != PETCARE_USER or body.get("password") != self.password:
            return web.json_response({"error": "invalid"}, status=401)
        self.valid_tokens.add(self.issued_token)
        return web.json_response({"data": {"token": self.issued_token, "user": {}}})

    async def me_start(self, request: web.Request) -> web.Response:
        self.requests["start"] += 1
        if not self._check(request):
            return web.json_response({"error": "expired"}, status=401)
        if self.start_status is not None:
            return web.Response(status=self.start_status, text="error")
        return web.json_response({"data": self.start})

    async def pets(self, request: web.Request) -> web.Response:
        self.requests["pets"] += 1
        if not self._check(request):
            return web.json_response({"error": "expired"}, status=401)
        return web.json_response({"data": self.pet_positions})

    async def set_position(self, request: web.Request) -> web.Response:
        self.requests["position"] += 1
        if not self._check(request):
            return web.json_response({"error": "expired"}, status=401)
        body = await request.json()
        pet_id = int(request.match_info["pet_id"])
        self.posted_positions.append((pet_id, body))
        answer = self.position_answer
        if answer is None:
            answer = {"tag_id": 1, "device_id": 2, **body}
        return web.json_response({"data": answer})


@pytest.fixture
async def session():
    """A plain aiohttp session for the API clients."""
    async with aiohttp.ClientSession() as client_session:
        yield client_session


@pytest.fixture
async def myenergi_server(jstatus_payload):
    """Start a fake myenergi API serving the sample topology."""
    fake = FakeMyEnergi()
    fake.responses["/cgi-jstatus-*"] = jstatus_payload
    server = TestServer(fake.app)
    await server.start_server()
    fake.base_url = str(server.make_url("/"))
    yield fake
    await server.close()


@pytest.fixture
def petcare_start() -> dict[str, Any]:
    """A /me/start answer with one household, one pet and one flap."""
    return {
        "households": [
            {
                "id": 87435,
                "name": "My Home",
                "share_code": "HDghsHj7D22sG2sP",
                "timezone_id": 340,
                "created_at": "2019-09-02T08:20:45+00:00",
                "updated_at": "2019-09-02T08:20:48+00:00",
            }
        ],
        "pets": [
            {
                "id": 34675,
                "name": "Cat",
                "gender": 0,
                "comments": "",
                "household_id": 87435,
                "breed_id": 382,
                "photo_id": 23412,
                "species_id": 1,
                "tag_id": 234523,
                "photo": {"id": 23412, "location": "https://example.invalid/cat.jpg"},
                "position": {
                    "tag_id": 234523,
                    "device_id": 876348,
                    "where": 2,
                    "since": "2019-09-11T09:24:13+00:00",
                },
            }
        ],
        "devices": [
            {
                "id": 876348,
                "name": "Back door",
                "product_id": 6,
                "household_id": 87435,
                "parent_device_id": 318966,
                "serial_number": "H008-0123456",
                "mac_address": "0000801F12345678",
                "status": {"battery": 5.82, "online": True},
            }
        ],
    }


@pytest.fixture
async def petcare_server(petcare_start):
    """Start a fake Sure Petcare API."""
    fake = FakeSurePetcare()
    fake.start = petcare_start
    server = TestServer(fake.app)
    await server.start_server()
    fake.base_url = str(server.make_url("/api"))
    yield fake
    await server.close()
