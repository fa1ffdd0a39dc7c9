"""Instructions accepted by the execution host and their binary encoding.

Layout (integers little-endian, vectors prefixed by their u32 length):

    tag: u8                     0 = VerifyProof, 1 = VerifyProofWithBalance
    index: u64
    mode: u8
    proof: vec
    public_inputs: u32 count, then one vec per input
    prepared_inputs: u8 flag, then a vec if the flag is 1
    balance_threshold: u64      VerifyProofWithBalance only
    account: vec (UTF-8)        VerifyProofWithBalance only
"""

from dataclasses import dataclass

from zkverifier.errors import FormatError
from zkverifier.types.proof_package import PackagedProof, PackagingMode
from zkverifier.util.utility_functions import ByteReader, encode_u8, encode_u32, encode_u64, encode_vec

VERIFY_PROOF_TAG = 0
VERIFY_PROOF_WITH_BALANCE_TAG = 1


@dataclass(frozen=True)
class VerifyProof:
    """Verify `package` and record the outcome under (caller, index)."""

    package: PackagedProof
    index: int


@dataclass(frozen=True)
class VerifyProofWithBalance:
    """Verify `package` and require the balance of `account` to be at least `balance_threshold`."""

    package: PackagedProof
    index: int
    balance_threshold: int
    account: str


Instruction = VerifyProof | VerifyProofWithBalance


def _encode_package(package: PackagedProof) -> bytes:
    out = encode_u8(package.mode) + encode_vec(package.proof)
    out += encode_u32(len(package.public_inputs))
    for public_input in package.public_inputs:
        out += encode_vec(public_input)
    if package.prepared_inputs is None:
        out += encode_u8(0)
    else:
        out += encode_u8(1) + encode_vec(package.prepared_inputs)
    return out


def _decode_package(reader: ByteReader) -> PackagedProof:
    value = reader.u8()
    try:
        mode = PackagingMode(value)
    except ValueError as err:
        msg = f"Unknown packaging mode {value}"
        raise FormatError(msg) from err
    proof = reader.vec()
    public_inputs = tuple(reader.vec() for _ in range(reader.u32()))
    match reader.u8():
        case 0:
            prepared_inputs = None
        case 1:
            prepared_inputs = reader.vec()
        case flag:
            msg = f"Invalid prepared inputs flag {flag}"
            raise FormatError(msg)
    return PackagedProof(mode, proof, public_inputs, prepared_inputs)


def encode_instruction(instruction: Instruction) -> bytes:
    """Serialise an instruction for submission to the host."""
    match instruction:
        case VerifyProofWithBalance(package, index, balance_threshold, account):
            return (
                encode_u8(VERIFY_PROOF_WITH_BALANCE_TAG)
                + encode_u64(index)
                + _encode_package(package)
                + encode_u64(balance_threshold)
                + encode_vec(account.encode("utf-8"))
            )
        case VerifyProof(package, index):
            return encode_u8(VERIFY_PROOF_TAG) + encode_u64(index) + _encode_package(package)
        case _:
            msg = f"Unknown instruction {instruction!r}"
            raise TypeError(msg)


def decode_instruction(data: bytes) -> Instruction:
    """Deserialise an instruction.

    Raises:
        FormatError: If the tag is unknown, the data is truncated, or trailing bytes are left over.
    """
    reader = ByteReader(data)
    tag = reader.u8()
    match tag:
        case 0:
            instruction = VerifyProof(index=reader.u64(), package=_decode_package(reader))
        case 1:
            index = reader.u64()
            package = _decode_package(reader)
            balance_threshold = reader.u64()
            try:
                account = reader.vec().decode("utf-8")
            except UnicodeDecodeError as err:
                msg = "Account is not valid UTF-8"
                raise FormatError(msg) from err
            instruction = VerifyProofWithBalance(package, index, balance_threshold, account)
        case _:
            msg = f"Unknown instruction tag {tag}"
            raise FormatError(msg)
    reader.finish()
    return instruction
