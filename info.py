api_url = 'https://odyssey-api-beta.sonic.game'
rpc_url = 'https://devnet.sonic.game/'
scan = 'https://explorer.sonic.game/tx/'

challenge_path = '/auth/sonic/challenge'
authorize_path = '/auth/sonic/authorize'
build_tx_path = '/nft-campaign/mint/unlimited/build-tx'

headers = {
    'accept': 'application/json, text/plain, */*',
    'content-type': 'application/json',
    'origin': 'https://odyssey.sonic.game',
    'referer': 'https://odyssey.sonic.game/',
    'sec-ch-ua': '"Not/A)Brand";v="8", "Chromium";v="126", "Google Chrome";v="126"',
    'sec-ch-ua-mobile': '?0',
    'sec-ch-ua-platform': '"Windows"',
    'sec-fetch-dest': 'empty',
    'sec-fetch-mode': 'cors',
    'sec-fetch-site': 'same-site',
}

additional_headers = {
    'accept-language': 'en-US,en;q=0.9',
    'cache-control': 'no-cache',
    'pragma': 'no-cache',
}
