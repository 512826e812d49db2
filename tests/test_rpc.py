import io
import os

from distlab.labgob import LabDecoder, LabEncoder
from distlab.mr.rpc import ExampleArgs, ExampleReply, coordinator_sock


def test_coordinator_sock_is_per_user_in_var_tmp():
    name = coordinator_sock()
    assert name == "/var/tmp/824-mr-" + str(os.getuid())


def test_coordinator_sock_lives_in_var_tmp():
    name = coordinator_sock()
    assert os.path.dirname(name) == "/var/tmp"
    assert os.path.basename(name).startswith("824-mr-")


def test_defaults_are_zero():
    assert ExampleArgs().x == 0
    assert ExampleReply().y == 0


def test_messages_round_trip_through_encoding():
    buf = io.BytesIO()
    encoder = LabEncoder(buf)
    encoder.encode(ExampleArgs(x=99))
    encoder.encode(ExampleReply(y=100))
    decoder = LabDecoder(io.BytesIO(buf.getvalue()))
    assert decoder.decode(ExampleArgs) == ExampleArgs(x=99)
    assert decoder.decode(ExampleReply) == ExampleReply(y=100)