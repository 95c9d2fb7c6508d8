"""Upload, addressing and minting pipeline."""
