"""
测试公共夹具
"""
import pytest
from datetime import datetime, timezone, timedelta

from cryptography import x509
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import ec
from cryptography.x509.oid import NameOID

# 2025-10-09 08:53:20 UTC
NOW = 1760000000

SIGNING_KEY = ec.generate_private_key(ec.SECP256R1())


def expires_for(day_diff: int, now: int = NOW) -> int:
    """返回使剩余天数恰好为 day_diff 的过期时间"""
    return now + day_diff * 86400 + 43200


def build_certificate(expires_at: int, email: str = None, common_name: str = "Test User") -> x509.Certificate:
    """生成自签名测试证书"""
    attributes = [x509.NameAttribute(NameOID.COMMON_NAME, common_name)]
    if email:
        attributes.append(x509.NameAttribute(NameOID.EMAIL_ADDRESS, email))
    name = x509.Name(attributes)

    not_after = datetime.fromtimestamp(expires_at, timezone.utc)

    return (
        x509.CertificateBuilder()
        .subject_name(name)
        .issuer_name(name)
        .public_key(SIGNING_KEY.public_key())
        .serial_number(x509.random_serial_number())
        .not_valid_before(not_after - timedelta(days=365))
        .not_valid_after(not_after)
        .sign(SIGNING_KEY, hashes.SHA256())
    )


@pytest.fixture
def cert_dir(tmp_path):
    """空的证书目录"""
    directory = tmp_path / "certs"
    directory.mkdir()
    return directory


@pytest.fixture
def write_certificate(cert_dir):
    """在证书目录中写入测试证书"""
    def _write(filename: str, expires_at: int, email: str = None, encoding: str = "PEM"):
        cert = build_certificate(expires_at, email=email)
        if encoding == "DER":
            data = cert.public_bytes(serialization.Encoding.DER)
        else:
            data = cert.public_bytes(serialization.Encoding.PEM)
        path = cert_dir / filename
        path.write_bytes(data)
        return str(path)

    return _write
