"""
Default round parameters for the raffle ledger.

These values define the public rules of a round when the environment does not
override them. Changing them changes payouts and MUST be publicly announced.
"""

# Entrance fee per identity (raw units)
ENTRANCE_FEE = 1

# Round duration in seconds (1 day)
ROUND_DURATION_S = 24 * 60 * 60

# Share of the pool paid to the winner, in percent. The rest is protocol fee.
WINNER_PERCENT = 80

# Minimum number of active entrants before a draw is allowed
MIN_ENTRANTS = 1

# Identities are base58 public keys of this many bytes
IDENTITY_BYTES = 32
