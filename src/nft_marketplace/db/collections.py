"""MongoDB collection names.

All foreign keys to a collection use its contract address; Person records are
keyed by wallet address.
"""

PERSON = "Person"
NFT = "NFT"
ACTIVITY = "Activity"
NFT_COLLECTION = "NFTCollection"
