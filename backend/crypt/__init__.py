"""
The `crypt` package provides cryptographic utilities that secure
authentication workflows and user data.

Contents
--------
- encrypt_decrypt
    Utility module exposing the `EncryptionDec` class:
        * `hash_password` — securely hashes plaintext passwords using bcrypt
        * `check_passwords` — verifies a plaintext password against a hashed one
        * `is_valid_password` — enforces the minimum password length (6+)
"""
