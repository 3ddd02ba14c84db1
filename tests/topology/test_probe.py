import socket

from gpinstall.topology.probe import TcpProber


def test_listening_port_is_reachable():
    srv = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    srv.bind(("127.0.0.1", 0))
    srv.listen(1)
    try:
        port = srv.getsockname()[1]
        assert TcpProber(port=port, timeout=2.0).probe("127.0.0.1") is True
    finally:
        srv.close()


def test_closed_port_is_unreachable():
    s = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    s.bind(("127.0.0.1", 0))
    port = s.getsockname()[1]
    s.close()
    assert TcpProber(port=port, timeout=2.0).probe("127.0.0.1") is False


def test_unresolvable_host_is_unreachable():
    assert TcpProber(timeout=1.0).probe("no-such-host.invalid") is False
