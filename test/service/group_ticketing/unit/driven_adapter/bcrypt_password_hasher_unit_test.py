from pydantic import SecretStr
import pytest

from src.service.group_ticketing.driven_adapter.security.bcrypt_password_hasher import (
    BcryptPasswordHasher,
)


@pytest.fixture(scope='module')
def hasher() -> BcryptPasswordHasher:
    return BcryptPasswordHasher()


@pytest.fixture(scope='module')
def hashed(hasher: BcryptPasswordHasher) -> str:
    return hasher.hash_password(plain_password=SecretStr('P@ssw0rd'))


class TestBcryptPasswordHasher:
    def test_hash_is_salted_bcrypt(self, hasher: BcryptPasswordHasher, hashed: str) -> None:
        again = hasher.hash_password(plain_password=SecretStr('P@ssw0rd'))

        assert hashed.startswith('$2b$')
        assert again != hashed

    def test_verify(self, hasher: BcryptPasswordHasher, hashed: str) -> None:
        assert hasher.verify_password(plain_password=SecretStr('P@ssw0rd'), hashed_password=hashed)
        assert not hasher.verify_password(
            plain_password=SecretStr('p@ssw0rd'), hashed_password=hashed
        )

    @pytest.mark.parametrize('stored', ['', 'not-a-bcrypt-hash'])
    def test_unusable_stored_hash(self, hasher: BcryptPasswordHasher, stored: str) -> None:
        assert not hasher.verify_password(plain_password=SecretStr('x'), hashed_password=stored)
