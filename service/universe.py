import random

# (symbol, display name)
MARKET_POOL = [
    # Big tech
    ("AAPL", "Apple"),
    ("MSFT", "Microsoft"),
    ("GOOGL", "Google"),
    ("AMZN", "Amazon"),
    ("NVDA", "Nvidia"),
    ("META", "Meta"),
    ("TSLA", "Tesla"),
    ("AMD", "AMD"),
    ("NFLX", "Netflix"),
    ("AVGO", "Broadcom"),
    # Crypto / miners
    ("COIN", "Coinbase"),
    ("MSTR", "MicroStrategy"),
    ("MARA", "Marathon Digital"),
    ("RIOT", "Riot Platforms"),
    ("CLSK", "CleanSpark"),
    ("HUT", "Hut 8"),
    ("BITF", "Bitfarms"),
    ("CORZ", "Core Scientific"),
    ("IREN", "Iris Energy"),
    ("WULF", "Terawulf"),
    # Meme / retail
    ("GME", "GameStop"),
    ("AMC", "AMC Ent"),
    ("HOOD", "Robinhood"),
    ("DKNG", "DraftKings"),
    ("PLTR", "Palantir"),
    ("SOFI", "SoFi"),
    ("OPEN", "Opendoor"),
    ("CVNA", "Carvana"),
    ("UPST", "Upstart"),
    ("AI", "C3.ai"),
    ("RIVN", "Rivian"),
    ("LCID", "Lucid"),
    ("CHPT", "ChargePoint"),
    ("SPCE", "Virgin Galactic"),
    # Growth / SaaS
    ("SNOW", "Snowflake"),
    ("CRM", "Salesforce"),
    ("SHOP", "Shopify"),
    ("UBER", "Uber"),
    ("ABNB", "Airbnb"),
    ("DASH", "DoorDash"),
    ("SQ", "Block"),
    ("PYPL", "PayPal"),
    ("ROKU", "Roku"),
    ("TTD", "Trade Desk"),
    ("NET", "Cloudflare"),
    ("DDOG", "Datadog"),
    ("CRWD", "CrowdStrike"),
    ("ZS", "Zscaler"),
    # Semiconductors
    ("INTC", "Intel"),
    ("MU", "Micron"),
    ("QCOM", "Qualcomm"),
    ("TSM", "TSMC"),
    ("ARM", "Arm Holdings"),
    ("SMCI", "Super Micro"),
    ("TXN", "Texas Instruments"),
    ("LRCX", "Lam Research"),
    # Blue chip
    ("JPM", "JPMorgan"),
    ("BAC", "Bank of America"),
    ("WMT", "Walmart"),
    ("PG", "Procter & Gamble"),
    ("JNJ", "Johnson & Johnson"),
    ("XOM", "Exxon Mobil"),
    ("CVX", "Chevron"),
    ("KO", "Coca-Cola"),
    ("DIS", "Disney"),
    ("BA", "Boeing"),
    ("CAT", "Caterpillar"),
    ("DE", "Deere"),
    ("F", "Ford"),
    ("GM", "GM"),
    ("COST", "Costco"),
    ("TGT", "Target"),
]

# Fixed watchlist for the daily magic pick; iteration order decides ties.
MAGIC_CANDIDATES = [
    "NVDA", "TSLA", "AMD", "COIN", "MSTR", "AAPL", "MSFT", "GOOGL",
    "AMZN", "META", "PLTR", "MARA", "RIOT", "HOOD", "DKNG", "UBER",
    "ABNB", "SNOW", "CRM", "NFLX", "INTC", "PYPL", "SQ",
]


def sample_candidates(pool=MARKET_POOL, size=28, rng=None):
    """Random subset of the pool, small enough to stay under the quote API rate limit."""
    rng = rng or random
    batch = list(pool)
    rng.shuffle(batch)
    return batch[:size]
