"""NFT marketplace backend: owner profiles, collections, activity and trade metrics."""
