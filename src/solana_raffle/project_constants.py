"""
Project-wide immutable parameters for the periodic SOL raffle.

These values define the public rules of every round.
Changing them changes eligibility and MUST be publicly announced.
"""

# SOL uses 9 decimals (lamports)
LAMPORT_DECIMALS = 9

# Fixed entry fee (raw units)
ENTRANCE_FEE = 10_000_000  # 0.01 SOL in lamports

# Minimum seconds between round starts
INTERVAL_SECONDS = 30

# One random word decides one winner
NUM_WORDS = 1

# Slots between the randomness request and the slot whose blockhash seeds it
REQUEST_CONFIRMATIONS = 3
