import pytest

from httpacket import EncodingError, HTTPMethod, InvalidArgument, RequestBuilder, Settings
from httpacket.utils import DEFAULT_ACCEPT_CHARSET, default_user_agent


def test_request_line_starts_the_packet():
    data = RequestBuilder.create(HTTPMethod.GET, '/x').to_bytes()

    assert data.startswith(b'GET /x HTTP/1.1\r\n')


def test_get_without_path_targets_root():
    assert RequestBuilder.get().to_bytes().startswith(b'GET / HTTP/1.1\r\n')


@pytest.mark.parametrize('factory, method', [
    (RequestBuilder.options, 'OPTIONS'),
    (RequestBuilder.get, 'GET'),
    (RequestBuilder.head, 'HEAD'),
    (RequestBuilder.post, 'POST'),
    (RequestBuilder.put, 'PUT'),
    (RequestBuilder.delete, 'DELETE'),
    (RequestBuilder.trace, 'TRACE'),
    (RequestBuilder.connect, 'CONNECT'),
])
def test_every_method_has_a_constructor(factory, method):
    request = factory('/a')

    assert request.method is HTTPMethod(method)
    assert request.to_bytes().startswith(f'{method} /a HTTP/1.1\r\n'.encode())


def test_defaults_are_present():
    headers = RequestBuilder.get('/').headers

    assert list(headers) == ['User-Agent', 'Accept-Charset']
    assert headers.user_agent == default_user_agent()
    assert headers.accept_charset == 'ISO-8859-1,UTF-8;q=0.7,*;q=0.7'

    text = RequestBuilder.get('/').to_text()
    assert 'Accept-Charset: ISO-8859-1,UTF-8;q=0.7,*;q=0.7\r\n' in text
    assert f'User-Agent: {default_user_agent()}\r\n' in text


def test_end_to_end_post():
    request = (
        RequestBuilder.create('POST', 'search.php')
            .with_host('http://example.com')
            .with_from('lukebrodowski@gmail.com')
            .with_body('Some sample data.')
    )

    expected = (
        'POST search.php HTTP/1.1\r\n'
        f'User-Agent: {default_user_agent()}\r\n'
        f'Accept-Charset: {DEFAULT_ACCEPT_CHARSET}\r\n'
        'Host: http://example.com\r\n'
        'From: lukebrodowski@gmail.com\r\n'
        '\r\n'
        'Some sample data.'
    )

    assert request.to_text() == expected
    assert str(request) == expected
    assert bytes(request) == expected.encode()


def test_chaining_returns_the_same_builder():
    request = RequestBuilder.get()

    assert request.with_host('a') is request
    assert request.with_from('b') is request
    assert request.with_body(b'c') is request
    assert request.with_user_agent('d') is request
    assert request.with_accept_charset('e') is request
    assert request.with_header('X-Test', 'f') is request
    assert request.without_header('X-Test') is request
    assert request.with_content_length() is request


def test_header_override_keeps_one_field():
    request = RequestBuilder.get().with_host('a').with_host('b')
    text = request.to_text()

    assert text.count('Host:') == 1
    assert 'Host: b\r\n' in text


def test_user_agent_and_charset_override_defaults_in_place():
    request = RequestBuilder.get().with_user_agent('agent/1.0').with_accept_charset('utf-8')

    assert request.to_text() == (
        'GET / HTTP/1.1\r\n'
        'User-Agent: agent/1.0\r\n'
        'Accept-Charset: utf-8\r\n'
        '\r\n'
    )


def test_body_accumulates():
    request = RequestBuilder.post('/').with_body('foo').with_body(b'bar').with_body(bytearray(b'!'))

    assert request.body == b'foobar!'
    assert request.to_bytes().endswith(b'\r\n\r\nfoobar!')


def test_body_rejects_other_types():
    with pytest.raises(TypeError):
        RequestBuilder.post('/').with_body(42)  # type: ignore


def test_serialization_is_idempotent_and_deterministic():
    def build():
        return RequestBuilder.put('/item').with_host('h').with_header('X-A', '1').with_body('data')

    request = build()
    first = request.to_bytes()

    assert request.to_bytes() == first
    assert build().to_bytes() == first


def test_no_content_length_by_default():
    data = RequestBuilder.post('/').with_body('abc').to_bytes()

    assert b'Content-Length' not in data


def test_content_length_opt_in_tracks_body():
    request = RequestBuilder.post('/').with_content_length().with_body('abc')
    assert request.to_text().endswith('Content-Length: 3\r\n\r\nabc')

    request.with_body('de')
    assert request.to_text().endswith('Content-Length: 5\r\n\r\nabcde')

    request.with_content_length(False)
    assert 'Content-Length' not in request.to_text()


def test_explicit_content_length_wins():
    request = RequestBuilder.post('/').with_header('Content-Length', '10').with_content_length()

    assert request.to_text().count('Content-Length') == 1
    assert 'Content-Length: 10\r\n' in request.to_text()


def test_empty_body_ends_with_blank_line():
    assert RequestBuilder.head('/').to_bytes().endswith(b'\r\n\r\n')


@pytest.mark.parametrize('path', ['', 'a b', '/x\r\n', '\t'])
def test_malformed_path_is_rejected(path):
    with pytest.raises(InvalidArgument):
        RequestBuilder.get(path)


def test_unknown_method_is_rejected():
    with pytest.raises(InvalidArgument):
        RequestBuilder.create('PATCH', '/')


def test_method_strings_are_case_insensitive():
    assert RequestBuilder.create('delete', '/').method is HTTPMethod.DELETE


def test_failed_configuration_leaves_state_untouched():
    request = RequestBuilder.get().with_host('a')
    before = request.to_bytes()

    with pytest.raises(InvalidArgument):
        request.with_host('evil\r\nX-Injected: 1')

    with pytest.raises(InvalidArgument):
        request.with_header('Bad Name', 'x')

    assert request.to_bytes() == before


def test_encoding_errors_propagate():
    request = RequestBuilder.post('/', settings=Settings(encoding='ascii'))
    before = request.to_bytes()

    with pytest.raises(EncodingError) as info:
        request.with_body('café')

    with pytest.raises(EncodingError):
        request.with_host('höst')

    assert info.value.encoding == 'ascii'
    assert isinstance(info.value.__cause__, UnicodeError)
    assert request.to_bytes() == before


def test_to_text_matches_decoded_bytes():
    request = RequestBuilder.post('/').with_body('naïve ✓')

    assert request.to_text() == request.to_bytes().decode('utf-8')


def test_to_text_replaces_undecodable_body_bytes():
    request = RequestBuilder.post('/').with_body(b'\x89PNG\xff')

    assert request.to_text().endswith('\r\n\r\n\ufffdPNG\ufffd')
    assert str(request) == request.to_bytes().decode('utf-8', 'replace')
    assert request.body == b'\x89PNG\xff'


def test_settings_supply_defaults():
    settings = Settings(protocol='HTTP/1.0', user_agent='custom', accept_charset='utf-8', encoding='latin-1')
    request = RequestBuilder.get('/', settings=settings).with_body('é')

    assert request.to_bytes() == (
        b'GET / HTTP/1.0\r\n'
        b'User-Agent: custom\r\n'
        b'Accept-Charset: utf-8\r\n'
        b'\r\n'
        b'\xe9'
    )


def test_protocol_setter_validates():
    request = RequestBuilder.get()
    request.protocol = 'HTTP/1.0'

    assert request.to_bytes().startswith(b'GET / HTTP/1.0\r\n')

    with pytest.raises(InvalidArgument):
        request.protocol = 'HTTP/2'

    assert request.protocol == 'HTTP/1.0'


def test_headers_and_body_are_snapshots():
    request = RequestBuilder.get()

    request.headers['Host'] = 'ignored'
    assert 'Host' not in request.headers

    body = request.body
    request.with_body('x')
    assert body == b''


def test_copy_is_independent():
    original = RequestBuilder.post('/').with_host('a').with_body('1')
    clone = original.copy().with_host('b').with_body('2')

    assert 'Host: a\r\n' in original.to_text()
    assert original.body == b'1'
    assert 'Host: b\r\n' in clone.to_text()
    assert clone.body == b'12'


def test_without_header_removes_field():
    request = RequestBuilder.get().with_from('me@example.com').without_header('from')

    assert 'From' not in request.to_text()
    request.without_header('Missing')


def test_repr():
    text = repr(RequestBuilder.get('/a'))

    assert text.startswith('<RequestBuilder method=')
    assert "path='/a' protocol='HTTP/1.1'>" in text


def test_without_header_ignores_non_string_names():
    request = RequestBuilder.get()
    before = request.to_bytes()

    assert request.without_header(1) is request  # type: ignore
    assert request.to_bytes() == before
