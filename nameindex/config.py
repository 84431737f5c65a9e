import os
from dotenv import load_dotenv
from web3 import Web3

# always load from local file
load_dotenv(".env")

# -------- env / config --------
NODE_URL         = os.getenv("NODE_URL", "https://node-mainnet.vechain.energy")
REGISTRY_ADDRESS = os.getenv("REGISTRY_ADDRESS", "0xa9231da8BF8D10e2df3f6E03Dd5449caD600129b")
DB_PATH          = os.getenv("DB_PATH", "index.db")
PAGE_SIZE        = int(os.getenv("PAGE_SIZE", "256"))
HTTP_TIMEOUT     = float(os.getenv("HTTP_TIMEOUT", "30"))
MCP_HOST         = os.getenv("MCP_HOST", "0.0.0.0")
MCP_PORT         = int(os.getenv("MCP_PORT", "8000"))

if not Web3.is_address(REGISTRY_ADDRESS.lower()):
    raise SystemExit(f"Invalid REGISTRY_ADDRESS in .env: {REGISTRY_ADDRESS}")
if PAGE_SIZE < 1:
    raise SystemExit("PAGE_SIZE must be positive")

# --- reverse resolution namespace ---
REVERSE_SUFFIX = "addr.reverse"
