"""Protocol constants for Sapience markets on Base."""

BASE_CHAIN_ID = 8453
BASE_EXPLORER_URL = "https://basescan.org"

# sUSDS collateral token on Base
SUSDS_ADDRESS = "0x5875eEE11Cf8398102FdAd704C9E96607675467a"
BASE_TOKEN_NAME = "Yes"

HTTP_BAD_REQUEST = 400
