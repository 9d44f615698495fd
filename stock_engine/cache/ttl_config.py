"""
Stock Dashboard — TTL Configuration
─────────────────────────────────────
Single source of truth for all cache durations.
Organised by request type: how "live" the answer is meant to look.
"""

# ── Per request-type TTL (seconds) ────────────────────────────

TTL = {
    # Synthetic series are deterministic; TTL only bounds memory
    "series":  5 * 60,      # 5 minutes
    # Catalog search
    "search":  2 * 60,      # 2 minutes
    # Live-looking quote, also bucketed in its key
    "quote":   60,          # 1 minute
}

DEFAULT_TTL = TTL["series"]

# ── Quote key bucket ──────────────────────────────────────────
# Leading digits of the epoch-millisecond clock kept in the quote key.
# 7 of 13 digits → buckets of 10^6 ms (~16.7 minutes).
QUOTE_BUCKET_DIGITS = 7
