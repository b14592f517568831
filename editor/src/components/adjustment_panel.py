"""
Garment Design Studio - Adjustment Panel

Numeric controls for the selected design element: scale, rotation and
opacity sliders plus a remove button. The panel edits through the
StudioSession, so slider edits and canvas gestures share one code path.
"""

import logging

from PyQt5.QtWidgets import QFrame, QWidget, QVBoxLayout, QHBoxLayout, QLabel, QSlider, QPushButton
from PyQt5.QtCore import Qt, pyqtSignal

from constants import (
	MIN_SCALE, MAX_SCALE, SCALE_SLIDER_STEP,
	ROTATION_SLIDER_MIN, ROTATION_SLIDER_MAX,
	MIN_OPACITY, MAX_OPACITY, OPACITY_SLIDER_STEP,
)
from models.design_element import normalize_rotation

logger = logging.getLogger(__name__)


class StepSlider(QWidget):
	"""Slider over a float range with a fixed step and a formatted readout"""

	valueChanged = pyqtSignal(float)

	def __init__(self, label, min_val, max_val, step, formatter, parent=None):
		super().__init__(parent)
		self.min_val = min_val
		self.max_val = max_val
		self.step = step
		self.formatter = formatter
		self._setup_ui(label)

	def _setup_ui(self, label):
		layout = QVBoxLayout(self)
		layout.setContentsMargins(0, 0, 0, 0)
		layout.setSpacing(2)

		header = QHBoxLayout()
		self.label = QLabel(f"{label}:")
		self.label.setStyleSheet("padding: 2px 5px; font-size: 11px;")
		header.addWidget(self.label)
		header.addStretch()
		self.value_label = QLabel()
		self.value_label.setStyleSheet("padding: 2px 5px; font-size: 11px; font-weight: bold;")
		header.addWidget(self.value_label)
		layout.addLayout(header)

		# Integer slider over step indices
		self.slider = QSlider(Qt.Horizontal)
		self.slider.setMinimum(0)
		self.slider.setMaximum(round((self.max_val - self.min_val) / self.step))
		self.slider.valueChanged.connect(self._on_slider_changed)
		layout.addWidget(self.slider)

		self._show(self.min_val)

	def _to_index(self, value):
		return round((value - self.min_val) / self.step)

	def _from_index(self, index):
		return round(self.min_val + index * self.step, 6)

	def _show(self, value):
		self.value_label.setText(self.formatter(value))

	def _on_slider_changed(self, index):
		value = self._from_index(index)
		self._show(value)
		self.valueChanged.emit(value)

	def value(self):
		return self._from_index(self.slider.value())

	def setValue(self, value):
		"""Set the slider without emitting valueChanged"""
		self.slider.blockSignals(True)
		self.slider.setValue(self._to_index(value))
		self.slider.blockSignals(False)
		self._show(value)


class AdjustmentPanel(QFrame):
	"""Sliders bound to the session's selected element"""

	def __init__(self, session, parent=None):
		super().__init__(parent)
		self.session = session
		self._setup_ui()
		self.session.add_listener(self._on_session_changed)
		self.refresh()

	def _setup_ui(self):
		layout = QVBoxLayout(self)
		layout.setContentsMargins(10, 10, 10, 10)
		layout.setSpacing(8)

		title = QLabel("Adjust graphic")
		title.setStyleSheet("font-size: 12px; font-weight: bold;")
		layout.addWidget(title)

		self.scale_slider = StepSlider("Scale", MIN_SCALE, MAX_SCALE, SCALE_SLIDER_STEP,
									   lambda v: f"{round(v * 100)}%")
		self.scale_slider.valueChanged.connect(lambda v: self._apply('scale', v))
		layout.addWidget(self.scale_slider)

		self.rotation_slider = StepSlider("Rotate", ROTATION_SLIDER_MIN, ROTATION_SLIDER_MAX, 1,
										  lambda v: f"{round(v)}°")
		self.rotation_slider.valueChanged.connect(lambda v: self._apply('rotation', v))
		layout.addWidget(self.rotation_slider)

		self.opacity_slider = StepSlider("Opacity", MIN_OPACITY, MAX_OPACITY, OPACITY_SLIDER_STEP,
										 lambda v: f"{round(v * 100)}%")
		self.opacity_slider.valueChanged.connect(lambda v: self._apply('opacity', v))
		layout.addWidget(self.opacity_slider)

		self.remove_btn = QPushButton("Remove graphic")
		self.remove_btn.clicked.connect(self._remove_selected)
		layout.addWidget(self.remove_btn)

		layout.addStretch()

	def _on_session_changed(self, reason):
		self.refresh()

	def detach(self):
		self.session.remove_listener(self._on_session_changed)

	def refresh(self):
		"""Load the selected element's values; hide when nothing is selected"""
		element = self.session.selected_element() if self.session.garment is not None else None
		if element is None:
			self.setVisible(False)
			return
		self.scale_slider.setValue(element.scale)
		# Slider shows the wrapped angle; the stored value stays raw
		self.rotation_slider.setValue(normalize_rotation(element.rotation))
		self.opacity_slider.setValue(element.opacity)
		self.setVisible(True)

	def _apply(self, field, value):
		element = self.session.selected_element()
		if element is None:
			return
		self.session.update_element(self.session.active_view, element.id, **{field: value})

	def _remove_selected(self):
		element = self.session.selected_element()
		if element is None:
			return
		self.session.remove_element(self.session.active_view, element.id)
		logger.debug("Removed %s from the panel", element.id)
