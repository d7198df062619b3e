import os

from info import api_url, rpc_url


def read_lines(path):
    if not os.path.exists(path):
        return []
    with open(path, 'r') as f:
        return [row.strip() for row in f if row.strip()]


# private key (base58, as exported by the wallet) goes into the SONIC_PRIVATE_KEY env variable,
# or one key per line into keys.txt. never put a key into this file
PRIVATE_KEY = os.getenv('SONIC_PRIVATE_KEY', '').strip()
keys = [PRIVATE_KEY] if PRIVATE_KEY else read_lines('keys.txt')

# proxies are optional, format log:pass@ip:port, one per line in proxies.txt
proxies = read_lines('proxies.txt')

# rpc and api can be overridden if the default testnet endpoints are down
rpc = os.getenv('SONIC_RPC_URL', rpc_url)
api = os.getenv('SONIC_API_URL', api_url)

# pause between mints, seconds
MINT_DELAY = 2

# auth attempts per mint, the pause between them doubles every time starting from RETRY_DELAY seconds
RETRIES = 3
RETRY_DELAY = 1

# timeout for every api request, seconds
REQUEST_TIMEOUT = 30

# keep minting when one attempt fails
# on - 1, off - 0 (stops on the first error)
continue_on_error = 1

# shuffle wallets
# on - 1, off - 0
shuffle_keys = 0

# every attempt is appended here
results_file = 'result.csv'
