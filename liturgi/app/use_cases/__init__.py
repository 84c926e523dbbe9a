"""
Use Cases

One class per operation; each exposes async execute(...) -> Result.
"""
