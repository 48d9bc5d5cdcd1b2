import hashlib
import json

# Fields that make up a block's identity. The block's own 'hash' is never part of it.
HASHED_FIELDS = ('role', 'location', 'timestamp', 'description', 'previousHash')


def encode_block(block):
    """
    Serializa os campos de um bloco num formato canónico (JSON, chaves ordenadas).
    Campos extra (incluindo 'hash') são ignorados.
    """
    fields = {name: block[name] for name in HASHED_FIELDS}
    return json.dumps(
        fields, sort_keys=True, separators=(',', ':'), ensure_ascii=False
    ).encode('utf-8')


def digest(data):
    """SHA-256 hex digest of raw bytes."""
    return hashlib.sha256(data).hexdigest()


def hash_block(block):
    return digest(encode_block(block))
