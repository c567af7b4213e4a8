"""
Provably Fair Utilities for Randomness Fulfillment
Implements SHA-256 based derivation of 256-bit random words
"""

import secrets
import hashlib
from typing import Dict, Any, List, Optional


def generate_random_words(request_id: int, num_words: int,
                          server_seed: Optional[str] = None) -> Dict[str, Any]:
    """
    Generate provably fair random words for a randomness request.

    Algorithm:
    1. Generate server_seed (64 char hex string using cryptographically secure RNG)
       unless one is supplied
    2. For every word index i: combined = "server_seed:request_id:i"
    3. Compute SHA-256 hash of combined
    4. Interpret the full 64 hex chars as a 256-bit unsigned integer

    Args:
        request_id: Coordinator request id (acts as the nonce)
        num_words: Number of words to derive
        server_seed: Optional fixed seed (deterministic output for tests)

    Returns:
        Dictionary containing:
        - words: List of 256-bit integers
        - server_seed: Seed used
        - nonce: Request id as string
        - proof_hashes: SHA-256 hex digest per word
    """
    if num_words < 1:
        raise ValueError(f"num_words must be >= 1, got {num_words}")

    if server_seed is None:
        server_seed = secrets.token_hex(32)  # 64 character hex string

    nonce = str(request_id)
    proof_hashes = []
    words = []
    for index in range(num_words):
        combined = f"{server_seed}:{nonce}:{index}"
        proof_hash = hashlib.sha256(combined.encode()).hexdigest()
        proof_hashes.append(proof_hash)
        words.append(int(proof_hash, 16))

    return {
        'words': words,
        'server_seed': server_seed,
        'nonce': nonce,
        'proof_hashes': proof_hashes,
    }


def verify_random_words(server_seed: str, request_id: int, expected_words: List[int]) -> bool:
    """
    Verify random words by recomputing them from the revealed seed.

    Args:
        server_seed: Seed revealed after fulfillment
        request_id: Request id the words were delivered for
        expected_words: Words that were delivered

    Returns:
        True if every word matches, False otherwise
    """
    if not expected_words:
        return False

    recomputed = generate_random_words(request_id, len(expected_words), server_seed)
    return recomputed['words'] == list(expected_words)
