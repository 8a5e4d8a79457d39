from loguru import logger

from droidcommand.core.logger import log


def test_records_carry_the_calling_function():
    records = []
    handler_id = logger.add(lambda message: records.append(message.record), level="DEBUG")
    try:
        log.info("plain message")
        log.log_plan("open whatsapp", 2)
        log.log_step_result("wait_1", "Waiting for app to load", "ok")
    finally:
        logger.remove(handler_id)

    assert [record["function"] for record in records] == ["test_records_carry_the_calling_function"] * 3
    assert records[0]["message"] == "[DroidCommand] plain message"
    assert records[1]["level"].name == "INFO"
