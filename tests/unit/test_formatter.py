"""
Unit tests for the logging.Formatter adapter.
"""

import json
import logging
import sys
import pytest

from src.ecs.formatter import EcsFormatter
from tests.fakes import FakeResponse


def make_log_record(msg="hello %s", args=("world",), level=logging.INFO, exc_info=None, **extra):
    record = logging.LogRecord(
        name="shop.api",
        level=level,
        pathname=__file__,
        lineno=10,
        msg=msg,
        args=args,
        exc_info=exc_info,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestEcsFormatter:
    """Test LogRecord to ECS JSON conversion."""
    
    def test_core_fields(self):
        line = EcsFormatter().format(make_log_record())
        payload = json.loads(line)
        
        assert line.startswith('{"@timestamp":')
        assert payload["log.level"] == "info"
        assert payload["message"] == "hello world"
        assert payload["log.logger"] == "shop.api"
        assert "ecs.version" in payload
    
    def test_compact_single_line(self):
        line = EcsFormatter().format(make_log_record())
        
        assert "\n" not in line
        assert ", " not in line
    
    def test_service_options(self):
        formatter = EcsFormatter(service_name="checkout", service_version="2.0.0")
        payload = json.loads(formatter.format(make_log_record()))
        
        assert payload["service.name"] == "checkout"
        assert payload["service.version"] == "2.0.0"
        assert payload["event.dataset"] == "checkout"
    
    def test_exc_info_mapped(self):
        try:
            raise RuntimeError("db down")
        except RuntimeError:
            exc_info = sys.exc_info()
        payload = json.loads(EcsFormatter().format(make_log_record(level=logging.ERROR, exc_info=exc_info)))
        
        assert payload["log.level"] == "error"
        assert payload["error"]["type"] == "RuntimeError"
        assert payload["error"]["message"] == "db down"
        assert "db down" in payload["error"]["stack_trace"]
    
    def test_exception_as_message(self):
        err = ValueError("boom")
        payload = json.loads(EcsFormatter().format(make_log_record(msg=err, args=(), level=logging.ERROR)))
        
        assert payload["message"] == "boom"
        assert payload["error"]["type"] == "ValueError"
        assert payload["error"]["message"] == "boom"
    
    def test_exception_as_message_not_converted(self):
        formatter = EcsFormatter(convert_err=False)
        payload = json.loads(formatter.format(make_log_record(msg=ValueError("boom"), args=())))
        
        assert payload["message"] == "boom"
        assert "error" not in payload
    
    def test_err_extra_mapped(self):
        payload = json.loads(EcsFormatter().format(make_log_record(err=KeyError("sku"))))
        
        assert payload["error"]["type"] == "KeyError"
        assert "err" not in payload
    
    def test_req_res_extras(self, fake_request, fake_response):
        formatter = EcsFormatter(convert_req_res=True)
        payload = json.loads(formatter.format(make_log_record(req=fake_request, res=fake_response)))
        
        assert payload["http"]["request"]["method"] == "POST"
        assert payload["http"]["response"]["status_code"] == 201
        assert payload["url"]["path"] == "/cart/items"
        assert "req" not in payload
    
    def test_req_not_converted_by_default(self, fake_request):
        payload = json.loads(EcsFormatter().format(make_log_record(req=fake_request)))
        
        assert "http" not in payload
        assert isinstance(payload["req"], str)
    
    def test_custom_extras_merged(self):
        payload = json.loads(EcsFormatter().format(make_log_record(cart_id="c-9", message_hint="x")))
        
        assert payload["cart_id"] == "c-9"
        assert payload["message_hint"] == "x"
    
    def test_reserved_extras_dropped(self):
        payload = json.loads(EcsFormatter().format(make_log_record(service="spoofed")))
        
        assert "service" not in payload
    
    def test_standard_attributes_not_leaked(self):
        payload = json.loads(EcsFormatter().format(make_log_record()))
        
        for attr in ("levelno", "pathname", "lineno", "args", "msg", "created"):
            assert attr not in payload
    
    def test_with_logger(self, fake_request):
        logger = logging.getLogger("tests.formatter")
        logger.propagate = False
        logger.setLevel(logging.INFO)
        lines = []
        
        class ListHandler(logging.Handler):
            def emit(self, record):
                lines.append(self.format(record))
        
        handler = ListHandler()
        handler.setFormatter(EcsFormatter(convert_req_res=True))
        logger.addHandler(handler)
        try:
            logger.info("handled", extra={"req": fake_request, "res": FakeResponse(200)})
        finally:
            logger.removeHandler(handler)
        
        payload = json.loads(lines[0])
        assert payload["message"] == "handled"
        assert payload["http"]["response"]["status_code"] == 200
