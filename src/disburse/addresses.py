from xrpl import CryptoAlgorithm
from xrpl.wallet import Wallet


class AddressFactory:
    """Hands out throwaway destination addresses.

    Every address comes from a freshly generated keypair whose secret is
    dropped right away, so nothing is ever reused.
    """

    def __init__(self, algorithm: CryptoAlgorithm = CryptoAlgorithm.SECP256K1):
        self.algorithm = algorithm

    def generate(self, count: int) -> list[str]:
        if count < 0:
            raise ValueError(f"count must be >= 0, got {count}")
        return [Wallet.create(algorithm=self.algorithm).address for _ in range(count)]
