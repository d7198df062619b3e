import asyncio
import base64
import json
from dataclasses import dataclass
from typing import Optional

import aiohttp
import base58
from fake_useragent import UserAgent
from loguru import logger
from nacl.signing import SigningKey
from solana.rpc.commitment import Confirmed
from solders.keypair import Keypair
from solders.transaction import Transaction

from config import RETRIES, RETRY_DELAY, continue_on_error
from info import *


class SonicError(Exception):
    pass


class NetworkError(SonicError):
    pass


class HttpError(SonicError):
    def __init__(self, status, body=None):
        super().__init__(f'request failed with status code {status}')
        self.status = status
        self.body = body


class DecodeError(SonicError):
    pass


class SignatureError(SonicError):
    pass


class TransactionError(SonicError):
    pass


@dataclass
class MintAttempt:
    index: int
    address: str
    success: bool
    signature: Optional[str] = None
    error: Optional[str] = None


def get_keypair(privatekey):
    """Builds a keypair from a base58 private key, either the 64 byte secret or a 32 byte seed."""
    try:
        raw = base58.b58decode(privatekey.strip())
        if len(raw) == 32:
            return Keypair.from_seed(raw)
        if len(raw) != 64:
            raise ValueError(f'expected 32 or 64 bytes, got {len(raw)}')
        return Keypair.from_bytes(raw)
    except Exception as e:
        raise SignatureError(f'malformed private key: {e}') from e


def sign_challenge(keypair, challenge):
    # detached ed25519 signature, 64 bytes
    signing_key = SigningKey(bytes(keypair)[:32])
    return signing_key.sign(challenge.encode()).signature


def decode_tx(payload):
    try:
        return Transaction.from_bytes(base64.b64decode(payload, validate=True))
    except Exception as e:
        raise DecodeError(f'malformed transaction payload: {e}') from e


def get_field(data, *path):
    try:
        for key in path:
            data = data[key]
    except (KeyError, IndexError, TypeError):
        raise DecodeError(f'response has no {".".join(path)} field') from None
    return data


def log_error(address, what, error):
    logger.error(f'{address} - {what}: {error}...')
    if isinstance(error, HttpError):
        logger.error(f'{address} - response status: {error.status}')
        logger.error(f'{address} - response data: {json.dumps(error.body, indent=2)}')


async def retry(func, *args, retries=RETRIES, delay=RETRY_DELAY, **kwargs):
    """Calls func until it succeeds, waiting delay, 2 * delay, 4 * delay... seconds between attempts.

    Returns None once every attempt has failed.
    """
    for attempt in range(1, retries + 1):
        try:
            return await func(*args, **kwargs)
        except Exception as e:
            logger.error(f'attempt {attempt} failed: {e}...')
            if attempt < retries:
                wait = delay * 2 ** (attempt - 1)
                logger.info(f'retrying in {wait} seconds...')
                await asyncio.sleep(wait)
    return None


class Help:
    def __init__(self, session, api=api_url, proxy=None, user_agent=None):
        self.session = session
        self.api = api.rstrip('/')
        self.proxy = f'http://{proxy}' if proxy else None
        self.headers = {**headers, **additional_headers,
                        'user-agent': user_agent or UserAgent().random}

    async def request(self, method, path, token=None, **kwargs):
        headers = dict(self.headers)
        if token:
            headers['authorization'] = f'Bearer {token}'
        try:
            async with self.session.request(method, self.api + path, headers=headers,
                                            proxy=self.proxy, **kwargs) as response:
                status = response.status
                try:
                    text = await response.text()
                except UnicodeDecodeError as e:
                    raise DecodeError(f'{method} {path} returned a body that is not valid text: {e}') from e
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise NetworkError(f'{method} {path} failed: {e!r}') from e

        try:
            data = json.loads(text)
        except ValueError:
            data = None
        if not 200 <= status < 300:
            raise HttpError(status, text if data is None else data)
        if data is None:
            raise DecodeError(f'{method} {path} returned no json: {text[:200]}')
        return data


class SonicAuth(Help):
    async def get_challenge(self, address):
        data = await self.request('GET', challenge_path, params={'wallet': address})
        challenge = get_field(data, 'data')
        if not isinstance(challenge, str):
            raise DecodeError(f'challenge is not a string: {challenge!r}')
        logger.info(f'{address} - challenge obtained...')
        return challenge

    async def authorize(self, keypair, challenge):
        address = str(keypair.pubkey())
        signature = sign_challenge(keypair, challenge)
        json_data = {
            'address': address,
            'address_encoded': base64.b64encode(bytes(keypair.pubkey())).decode(),
            'signature': base64.b64encode(signature).decode(),
        }
        data = await self.request('POST', authorize_path, json=json_data)
        token = get_field(data, 'data', 'token')
        if not token or not isinstance(token, str):
            raise DecodeError(f'authorize returned no token: {token!r}')
        logger.success(f'{address} - authorization successful...')
        return token

    async def get_token(self, keypair):
        address = str(keypair.pubkey())
        try:
            challenge = await self.get_challenge(address)
            return await self.authorize(keypair, challenge)
        except SonicError as e:
            log_error(address, 'error fetching token', e)
            raise


class MysteryMint(Help):
    def __init__(self, privatekey, client, session, api=api_url, proxy=None, user_agent=None,
                 retries=RETRIES, retry_delay=RETRY_DELAY, continue_on_error=continue_on_error):
        super().__init__(session, api, proxy, user_agent)
        self.privatekey = privatekey
        self.client = client
        self.auth = SonicAuth(session, api, proxy, self.headers['user-agent'])
        self.retries = retries
        self.retry_delay = retry_delay
        self.continue_on_error = continue_on_error

    async def build_tx(self, token):
        data = await self.request('GET', build_tx_path, token=token)
        return decode_tx(get_field(data, 'data', 'hash'))

    async def check_status_tx(self, address, signature):
        logger.info(f'{address} - waiting for confirmation of {scan}{signature}...')
        resp = await self.client.confirm_transaction(signature, Confirmed)
        status = resp.value[0] if resp.value else None
        if status is not None and status.err:
            raise TransactionError(f'transaction {signature} failed: {status.err}')

    async def mint(self, index=0):
        address = '-'
        try:
            keypair = get_keypair(self.privatekey)
            address = str(keypair.pubkey())
            logger.info(f'{address} - minting Mystery NFT...')

            token = await retry(self.auth.get_token, keypair,
                                retries=self.retries, delay=self.retry_delay)
            if not token:
                raise SonicError('failed to obtain authentication token after multiple attempts')
            logger.success(f'{address} - token obtained...')

            tx = await self.build_tx(token)
            logger.info(f'{address} - transaction built...')
            # the server already added its own signatures
            tx.partial_sign([keypair], tx.message.recent_blockhash)

            signature = (await self.client.send_raw_transaction(bytes(tx))).value
            await self.check_status_tx(address, signature)
            logger.success(f'{address} - transaction sent and confirmed : {scan}{signature}...')
            return MintAttempt(index, address, True, signature=str(signature))
        except Exception as e:
            log_error(address, 'error minting Mystery NFT', e)
            if not self.continue_on_error:
                raise
            return MintAttempt(index, address, False, error=str(e))
