"""
Tests del disparador de watch (Debounce + Handler de watchdog)
"""

import os
import tempfile
import unittest
from unittest.mock import Mock, patch

from watchdog.events import FileCreatedEvent, FileDeletedEvent, FileModifiedEvent, FileMovedEvent, DirModifiedEvent

from assetrev.cli.watch import Debounce, Handler
from assetrev.core.config import Settings
from assetrev.versioner import VersionTask


class FakeTimer:
    """Timer manual: solo dispara cuando el test llama a fire()."""
    created = []

    def __init__(self, secs, fn):
        self.secs = secs; self.fn = fn; self.cancelled = False; self.daemon = False
        FakeTimer.created.append(self)

    def start(self):
        pass

    def cancel(self):
        self.cancelled = True

    def fire(self):
        if not self.cancelled:
            self.fn()


class TestDebounce(unittest.TestCase):

    def setUp(self):
        FakeTimer.created = []

    def test_burst_runs_once_with_last_event(self):
        fn = Mock()
        deb = Debounce(2.0, timer=FakeTimer)
        for _ in range(3):
            deb.call(fn)
        self.assertEqual([t.cancelled for t in FakeTimer.created], [True, True, False])
        for t in FakeTimer.created:
            t.fire()
        fn.assert_called_once_with()

    def test_event_after_run_schedules_again(self):
        fn = Mock()
        deb = Debounce(2.0, timer=FakeTimer)
        deb.call(fn)
        FakeTimer.created[-1].fire()
        deb.call(fn)
        FakeTimer.created[-1].fire()
        self.assertEqual(fn.call_count, 2)

    def test_cancel(self):
        fn = Mock()
        deb = Debounce(2.0, timer=FakeTimer)
        deb.call(fn)
        deb.cancel()
        FakeTimer.created[-1].fire()
        fn.assert_not_called()


class TestHandler(unittest.TestCase):

    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.public = os.path.join(self._tmp.name, "public")
        self.task = VersionTask(sources=["js/*.js"], settings=Settings(public_root=self.public))
        self.handler = Handler(self.task, debounce=0.3)

    def tearDown(self):
        self.handler.deb.cancel()
        self._tmp.cleanup()

    def p(self, *parts):
        return os.path.join(self.public, *parts)

    def wait(self):
        pending = self.handler.deb.pending
        if pending is not None:
            pending.join(5.0)

    def test_modified_source_triggers_run(self):
        with patch.object(self.task, "run") as run:
            self.handler.on_any_event(FileModifiedEvent(self.p("js", "app.js")))
            self.wait()
        run.assert_called_once_with()

    def test_last_save_in_burst_is_versioned(self):
        with patch.object(self.task, "run") as run:
            self.handler.on_any_event(FileModifiedEvent(self.p("js", "app.js")))
            self.handler.on_any_event(FileModifiedEvent(self.p("js", "app.js")))
            self.wait()
            self.assertEqual(run.call_count, 1)
            # un guardado justo después del run también se versiona
            self.handler.on_any_event(FileModifiedEvent(self.p("js", "app.js")))
            self.wait()
        self.assertEqual(run.call_count, 2)

    def test_created_and_moved_trigger_run(self):
        with patch.object(self.task, "run") as run:
            self.handler.on_any_event(FileCreatedEvent(self.p("js", "app.js")))
            self.wait()
            self.handler.on_any_event(FileMovedEvent(self.p("js", "tmp123"), self.p("js", "app.js")))
            self.wait()
        self.assertEqual(run.call_count, 2)

    def test_irrelevant_events_are_ignored(self):
        with patch.object(self.task, "run") as run:
            self.handler.on_any_event(FileDeletedEvent(self.p("js", "app.js")))
            self.handler.on_any_event(FileModifiedEvent(self.p("css", "app.css")))
            self.handler.on_any_event(DirModifiedEvent(self.p("js")))
            self.handler.on_any_event(FileModifiedEvent(self.p("build", "js", "app-abc.js")))
        self.assertIsNone(self.handler.deb.pending)
        run.assert_not_called()

    def test_failed_run_does_not_stop_watcher(self):
        self.task.run = Mock(side_effect=FileNotFoundError("gone"))
        self.handler.on_any_event(FileModifiedEvent(self.p("js", "app.js")))
        self.wait()
        self.handler.on_any_event(FileModifiedEvent(self.p("js", "app.js")))
        self.wait()
        self.assertEqual(self.task.run.call_count, 2)


if __name__ == "__main__":
    unittest.main()
