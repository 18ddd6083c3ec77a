from cryptography.fernet import Fernet, InvalidToken

from combined_totp.combined import normalize_seeds
from combined_totp.utils import open_file


def decrypt_file(seeds_file: str, key_file: str) -> str:
    """Decrypt a Fernet-encrypted file and return its content.

    Args:
        seeds_file: Path to the encrypted file to decrypt.
        key_file: Path to the file holding the Fernet key.

    Returns:
        Decrypted content as a string.

    Raises:
        ValueError: If the key is malformed or does not decrypt the file.
    """
    encrypted = open_file(seeds_file, "rb")
    fernet_key = open_file(key_file, "rb").strip()

    try:
        fernet = Fernet(fernet_key)
        decrypted = fernet.decrypt(encrypted)
    except InvalidToken as e:
        raise ValueError(f"{seeds_file}: cannot decrypt with {key_file}.") from e

    return decrypted.decode("utf-8")


def parse_seeds(content: str) -> list[bytes]:
    """Split a seeds file content into its six seeds, one per line.

    Lines end with "\\n" or "\\r\\n". Only those line endings are
    removed; any other character, form feeds included, is part of
    the seed.
    """
    lines = content.split("\n")
    if lines[-1] == "":
        lines.pop()

    seeds = [line[:-1] if line.endswith("\r") else line for line in lines]

    return normalize_seeds(seeds)


def load_seeds(seeds_file: str, key_file: str | None = None) -> list[bytes]:
    """Read the six seeds of a seeds file, decrypting it if needed.

    Args:
        seeds_file: Path to the seeds file.
        key_file: Path to a Fernet key file when seeds_file is encrypted.

    Returns:
        The six seeds as bytes, in file order.
    """
    if key_file:
        content = decrypt_file(seeds_file, key_file)
    else:
        content = open_file(seeds_file, "rb").decode("utf-8")

    return parse_seeds(content)
