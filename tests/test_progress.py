from pultctl.progress import ModalResult, WriteProgress


def test_initial_result_is_none():
    progress = WriteProgress()
    assert progress.modal_result is ModalResult.NONE
    assert progress.hidden is False


def test_set_start_data_resets_counters():
    progress = WriteProgress()
    progress.update(5, 12)
    progress.set_start_data(60)
    assert progress.maximum == 60
    assert progress.value == 0
    assert progress.kadr_num == 0
    assert progress.time_label == "60 c."


def test_update_reports_remaining_time():
    progress = WriteProgress()
    progress.set_start_data(60)
    progress.update(10, 5)
    assert progress.value == 10
    assert progress.kadr_num == 5
    assert progress.remaining == 60 - 10


def test_update_out_of_range_keeps_value():
    progress = WriteProgress()
    progress.set_start_data(30)
    progress.update(20, 1)
    progress.update(40, 2)
    assert progress.value == 20
    assert progress.kadr_num == 2


def test_cancel_and_stop():
    progress = WriteProgress()
    progress.cancel()
    assert progress.modal_result is ModalResult.CANCEL
    assert progress.hidden is True
    other = WriteProgress()
    other.stop()
    assert other.modal_result is ModalResult.OK
    assert other.hidden is True