import io
import json
import logging

import pytest

from skyflap.log import NoticeHandler, get_logger, notices, setup_logging


class FakeTty(io.StringIO):
    def isatty(self):
        return True


@pytest.fixture(autouse=True)
def restore_handlers():
    root = logging.getLogger('skyflap')
    saved, level = list(root.handlers), root.level
    yield
    for handler in root.handlers:
        if handler not in saved and handler is not notices:
            handler.close()
    root.handlers[:] = saved
    root.setLevel(level)


def _handler_types():
    return [type(h) for h in logging.getLogger('skyflap').handlers]


def test_terminal_stderr_gets_no_console_handler():
    setup_logging('info', stream=FakeTty())
    assert _handler_types() == [NoticeHandler]


def test_redirected_stderr_gets_human_lines():
    stream = io.StringIO()
    setup_logging('info', stream=stream)
    get_logger('test').info('hello', extra={'data': {'n': 1}})
    line = stream.getvalue().strip()
    assert '[I] test: hello' in line
    assert line.endswith('{"n": 1}')


def test_log_file_is_ndjson(tmp_path):
    path = tmp_path / 'skyflap.log'
    setup_logging('debug', str(path))
    get_logger('stats').debug('loaded', extra={'data': {'games': 2}})
    for handler in logging.getLogger('skyflap').handlers:
        handler.flush()
    entry = json.loads(path.read_text(encoding='utf-8').splitlines()[-1])
    assert entry['level'] == 'debug'
    assert entry['logger'] == 'skyflap.stats'
    assert entry['data'] == {'games': 2}


def test_warnings_become_notices():
    setup_logging('info', stream=FakeTty())
    get_logger('stats').info('not a notice')
    get_logger('stats').warning('Persistence unavailable')
    assert notices.latest() == 'Persistence unavailable'
    assert 'not a notice' not in notices.recent()


def test_notice_capacity():
    handler = NoticeHandler(capacity=2)
    for i in range(3):
        handler.emit(logging.makeLogRecord({'msg': f'n{i}'}))
    assert handler.recent() == ['n1', 'n2']
