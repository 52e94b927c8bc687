"""
Tests for EditSession.

Tests cover:
- Mutations requesting coalesced renders
- Generation tagging of decode completions
- Decode failures and placeholders
- Commit, encode failure and cancel semantics
"""

import threading
import unittest
from unittest.mock import Mock

import numpy as np

from conftest import make_pattern
from PE_Libs.errors import DecodeError, EncodeError, SessionClosedError
from PE_Libs.ImageEditingLib.adjustment_state import AdjustmentState
from PE_Libs.ImageEditingLib.raster_models import SourceRaster
from PE_Libs.SessionLib.edit_session import EditSession, next_generation
from PE_Libs.SessionLib.editor_config import EditorConfig


class TestEditSessionRendering(unittest.TestCase):
    """Test mutation and render behavior."""

    def setUp(self):
        self.pixels = make_pattern(4, 3)
        self.source = SourceRaster.from_array(self.pixels)
        self.previews = []
        self.session = EditSession(source=self.source, on_preview=self.previews.append)

    def test_ready_with_pending_first_render(self):
        self.assertTrue(self.session.is_ready)
        self.assertTrue(self.session.render_pending)
        self.assertIsNone(self.session.output)
        self.assertIsNone(self.session.placeholder_text)

    def test_preview_renders_source_unchanged(self):
        output = self.session.preview()
        np.testing.assert_array_equal(output.pixels, self.pixels)
        self.assertEqual(output.generation, self.session.generation)
        self.assertEqual(self.previews, [output])

    def test_slider_drag_is_coalesced(self):
        self.session.preview()
        for value in range(100, 201, 5):
            self.session.set_brightness(value)
        self.session.set_contrast(90)

        self.assertEqual(self.session.render_count, 1)
        self.session.flush()
        self.assertEqual(self.session.render_count, 2)
        self.assertEqual(len(self.previews), 2)
        self.assertEqual(self.session.state.brightness, 200)

    def test_immediate_config_renders_every_mutation(self):
        session = EditSession(source=self.source, config=EditorConfig(render_immediately=True))
        self.assertIsNotNone(session.output)
        session.rotate_right()
        self.assertEqual(session.output.size, (3, 4))
        session.rotate_left()
        self.assertEqual(session.output.size, (4, 3))
        self.assertEqual(session.render_count, 3)

    def test_all_mutations_reach_the_state(self):
        session = self.session
        session.set_brightness(250)
        session.set_contrast(-4)
        session.set_saturation(50)
        session.rotate_left()
        session.toggle_flip_horizontal()
        session.toggle_flip_vertical()
        self.assertEqual(
            session.state,
            AdjustmentState(
                brightness=200, contrast=0, saturation=50,
                rotation_degrees=270, flip_horizontal=True, flip_vertical=True,
            ),
        )
        session.reset()
        self.assertTrue(session.state.is_default())

    def test_brightness_round_trip_with_renders(self):
        original = self.session.preview()
        self.session.set_brightness(150)
        self.session.preview()
        self.session.set_brightness(100)
        self.assertTrue(self.session.preview().same_pixels(original))


class TestEditSessionLoading(unittest.TestCase):
    """Test decode completion handling."""

    def setUp(self):
        self.source = SourceRaster.from_array(make_pattern(4, 3))

    def test_loading_placeholder(self):
        session = EditSession()
        self.assertEqual(session.placeholder_text, "Loading image...")
        self.assertIsNone(session.preview())

    def test_matching_generation_is_applied(self):
        session = EditSession()
        self.assertTrue(session.apply_decode_result(session.generation, raster=self.source))
        self.assertTrue(session.is_ready)
        self.assertEqual(session.preview().size, (4, 3))

    def test_stale_generation_is_discarded(self):
        session = EditSession()
        stale = session.generation - 1
        self.assertFalse(session.apply_decode_result(stale, raster=self.source))
        self.assertEqual(session.status, "loading")
        self.assertIsNone(session.source)

    def test_completion_after_cancel_is_discarded(self):
        session = EditSession()
        tag = session.generation
        session.cancel()
        self.assertFalse(session.apply_decode_result(tag, raster=self.source))
        self.assertIsNone(session.source)
        self.assertEqual(session.status, "closed")

    def test_generations_increase(self):
        first = next_generation()
        self.assertGreater(next_generation(), first)
        self.assertGreater(EditSession().generation, first)

    def test_decode_error_blocks_preview(self):
        session = EditSession()
        session.apply_decode_result(session.generation, error=DecodeError("bad PNG"))
        self.assertEqual(session.status, "error")
        self.assertIsNone(session.preview())
        self.assertIsNone(session.output)
        self.assertIn("bad PNG", session.placeholder_text)
        with self.assertRaises(DecodeError):
            session.commit(Mock())

    def test_repeated_commit_after_decode_error_raises_fresh_errors(self):
        session = EditSession()
        stored = DecodeError("bad PNG")
        session.apply_decode_result(session.generation, error=stored)

        raised = []
        for _ in range(2):
            with self.assertRaises(DecodeError) as ctx:
                session.commit(Mock())
            raised.append(ctx.exception)

        self.assertIsNot(raised[0], raised[1])
        self.assertIsNot(raised[0], stored)
        self.assertIs(raised[0].__cause__, stored)
        self.assertEqual(str(raised[1]), "bad PNG")

    def test_decode_completion_on_worker_thread_does_not_render(self):
        preview_threads = []
        session = EditSession(
            config=EditorConfig(render_immediately=True),
            on_preview=lambda output: preview_threads.append(threading.current_thread()),
        )
        worker = threading.Thread(
            target=session.apply_decode_result, args=(session.generation,), kwargs={"raster": self.source}
        )
        worker.start()
        worker.join()

        self.assertTrue(session.is_ready)
        self.assertTrue(session.render_pending)
        self.assertIsNone(session.output)
        self.assertEqual(preview_threads, [])

        self.assertEqual(session.preview().size, (4, 3))
        self.assertEqual(preview_threads, [threading.current_thread()])

        session.rotate_right()
        self.assertEqual(session.output.size, (3, 4))
        self.assertEqual(preview_threads, [threading.current_thread()] * 2)


class TestEditSessionLifecycle(unittest.TestCase):
    """Test commit and cancel."""

    def setUp(self):
        self.source = SourceRaster.from_array(make_pattern(4, 3))

    def test_commit_hands_artifact_to_host_and_closes(self):
        on_save = Mock()
        session = EditSession(source=self.source)
        session.rotate_right()
        artifact = session.commit(on_save)

        on_save.assert_called_once_with(artifact)
        self.assertEqual((artifact.width, artifact.height), (3, 4))
        self.assertEqual(artifact.image_format, "PNG")
        self.assertFalse(session.is_open)
        self.assertIsNone(session.source)
        self.assertIsNone(session.output)

    def test_commit_uses_configured_format(self):
        encode = Mock(return_value=b"jpeg-bytes")
        session = EditSession(
            source=self.source,
            config=EditorConfig(export_format="jpg", quality=70),
            encode=encode,
        )
        artifact = session.commit(Mock())
        self.assertEqual(artifact.image_format, "JPEG")
        self.assertEqual(encode.call_args.kwargs, {"quality": 70})

    def test_encode_failure_keeps_session_open(self):
        encode = Mock(side_effect=EncodeError("out of memory"))
        on_save = Mock()
        session = EditSession(source=self.source, encode=encode)
        session.set_saturation(20)

        with self.assertRaises(EncodeError):
            session.commit(on_save)

        on_save.assert_not_called()
        self.assertTrue(session.is_open)
        self.assertEqual(session.state.saturation, 20)
        self.assertEqual(session.error_message, "out of memory")
        self.assertIsNotNone(session.output)

        encode.side_effect = None
        encode.return_value = b"png"
        session.commit(on_save)
        on_save.assert_called_once()

    def test_commit_while_loading_fails_without_closing(self):
        session = EditSession()
        with self.assertRaises(EncodeError):
            session.commit(Mock())
        self.assertTrue(session.is_open)

    def test_commit_after_close(self):
        session = EditSession(source=self.source)
        session.cancel()
        with self.assertRaises(SessionClosedError):
            session.commit(Mock())

    def test_cancel_discards_everything(self):
        session = EditSession(source=self.source)
        session.set_brightness(30)
        session.preview()
        session.cancel()

        self.assertEqual(session.status, "closed")
        self.assertIsNone(session.output)
        self.assertIsNone(session.source)
        self.assertTrue(session.state.is_default())
        self.assertFalse(session.render_pending)

    def test_mutations_after_close_are_ignored(self):
        session = EditSession(source=self.source)
        session.cancel()
        session.set_brightness(10)
        session.rotate_right()
        self.assertTrue(session.state.is_default())
        self.assertFalse(session.render_pending)


if __name__ == "__main__":
    unittest.main()
