import asyncio
import csv
import random
import sys

import aiohttp
from loguru import logger
from solana.rpc.async_api import AsyncClient
from solana.rpc.commitment import Confirmed

from config import *
from utils import MysteryMint


def parse_count(text):
    try:
        count = int(text.strip())
    except ValueError:
        raise ValueError(f'number of mints must be a whole number, got {text!r}') from None
    if count < 0:
        raise ValueError(f'number of mints can not be negative, got {count}')
    return count


async def write_to_csv(path, attempts):
    with open(path, 'a', newline='') as file:
        writer = csv.writer(file)

        if file.tell() == 0:
            writer.writerow(['address', 'attempt', 'result', 'signature'])

        for attempt in attempts:
            result = 'success' if attempt.success else f'error - {attempt.error}'
            writer.writerow([attempt.address, attempt.index + 1, result, attempt.signature or ''])


async def run_batch(mint, count, delay=MINT_DELAY, attempts=None):
    # filled in place, earlier results stay with the caller when a mint raises
    if attempts is None:
        attempts = []
    for i in range(count):
        logger.info(f'minting attempt {i + 1}/{count}...')
        attempts.append(await mint(i))
        if i < count - 1:
            logger.info(f'waiting {delay} seconds before next mint...')
            await asyncio.sleep(delay)
    return attempts


async def main(count):
    if len(keys) == 0:
        logger.error('no private key, set SONIC_PRIVATE_KEY or fill keys.txt...')
        return 1
    wallets = list(keys)
    if shuffle_keys:
        random.shuffle(wallets)
    logger.info(f'minting {count} times on {len(wallets)} wallets...')

    client = AsyncClient(rpc, commitment=Confirmed)
    try:
        timeout = aiohttp.ClientTimeout(total=REQUEST_TIMEOUT)
        async with aiohttp.ClientSession(timeout=timeout) as session:
            for key in wallets:
                proxy = random.choice(proxies) if proxies else None
                minter = MysteryMint(key, client, session, api=api, proxy=proxy,
                                     continue_on_error=continue_on_error)
                attempts = []
                try:
                    await run_batch(minter.mint, count, attempts=attempts)
                finally:
                    await write_to_csv(results_file, attempts)
                if attempts:
                    done = sum(attempt.success for attempt in attempts)
                    logger.success(f'{attempts[0].address} - {done}/{count} mints confirmed...')
    finally:
        await client.close()

    logger.success('minting finished...')
    return 0


def run():
    try:
        count = parse_count(input('How many times do you want to mint? '))
    except ValueError as e:
        logger.error(f'{e}...')
        sys.exit(1)
    try:
        code = asyncio.run(main(count))
    except Exception as e:
        logger.error(f'minting stopped: {e}...')
        sys.exit(1)
    sys.exit(code)


if __name__ == '__main__':
    run()
