import base64

import aiohttp
import base58
import pytest
import pytest_asyncio
from aiohttp import web
from aiohttp.test_utils import TestServer
from solders.hash import Hash
from solders.keypair import Keypair
from solders.message import Message
from solders.pubkey import Pubkey
from solders.system_program import TransferParams, transfer
from solders.transaction import Transaction

from info import authorize_path, build_tx_path, challenge_path


class MockApi:
    """In-memory stand-in for the odyssey api, records every request it gets."""

    def __init__(self):
        self.url = None
        self.challenge = 'abc123'
        self.token = 'token-1'
        self.tx = None
        self.challenge_failures = 0
        self.challenge_body = None
        self.authorize_status = 200
        self.challenges = []
        self.authorized = []
        self.build_tx_calls = []
        self.request_headers = []

    async def get_challenge(self, request):
        self.request_headers.append(request.headers.copy())
        self.challenges.append(request.query.get('wallet'))
        if self.challenge_failures > 0:
            self.challenge_failures -= 1
            return web.json_response({'message': 'service unavailable'}, status=503)
        if self.challenge_body is not None:
            return web.Response(body=self.challenge_body, content_type='application/json', charset='utf-8')
        return web.json_response({'data': self.challenge})

    async def authorize(self, request):
        self.authorized.append(await request.json())
        if self.authorize_status != 200:
            return web.json_response({'message': 'invalid signature'}, status=self.authorize_status)
        return web.json_response({'data': {'token': self.token}})

    async def build_tx(self, request):
        self.build_tx_calls.append(request.headers.get('Authorization'))
        return web.json_response({'data': {'hash': self.tx}})

    def app(self):
        app = web.Application()
        app.router.add_get(challenge_path, self.get_challenge)
        app.router.add_post(authorize_path, self.authorize)
        app.router.add_get(build_tx_path, self.build_tx)
        return app


def build_payload(user):
    """Mint-like transaction paid and already signed by a server key, still missing the user signature."""
    server = Keypair()
    ix = transfer(TransferParams(from_pubkey=user.pubkey(), to_pubkey=Pubkey.new_unique(), lamports=1))
    msg = Message.new_with_blockhash([ix], server.pubkey(), Hash.new_unique())
    tx = Transaction.new_unsigned(msg)
    tx.partial_sign([server], msg.recent_blockhash)
    return base64.b64encode(bytes(tx)).decode()


@pytest.fixture
def keypair():
    return Keypair.from_seed(bytes(range(32)))


@pytest.fixture
def privatekey(keypair):
    return base58.b58encode(bytes(keypair)).decode()


@pytest_asyncio.fixture
async def api():
    mock = MockApi()
    server = TestServer(mock.app())
    await server.start_server()
    mock.url = str(server.make_url('/')).rstrip('/')
    yield mock
    await server.close()


@pytest_asyncio.fixture
async def session():
    async with aiohttp.ClientSession() as session:
        yield session


@pytest.fixture
def mint_payload(keypair):
    return build_payload(keypair)
