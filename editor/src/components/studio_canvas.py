"""
Studio Canvas - Interactive stage for placing design elements

Paints the active view of the active garment:
- base image, contain-fitted inside the 600x800 stage box
- every design element of the view in paint order
- dashed selection box with rotate, delete and corner handles

Mouse and touch input is reduced to PointerEvent objects and handed to the
GestureController; the canvas itself never edits an element.
"""

import logging

from PyQt5.QtWidgets import QWidget
from PyQt5.QtCore import Qt, QRectF, QEvent, pyqtSignal
from PyQt5.QtGui import QPainter, QImage, QColor, QPen, QFont

from constants import (
	STAGE_WIDTH, STAGE_HEIGHT, BASE_ELEMENT_SIZE,
	MIN_STAGE_ZOOM, MAX_STAGE_ZOOM, STAGE_ZOOM_STEP,
)
from models.errors import ImageDecodeFailure, NoActiveGarment
from models.transform import ScreenPixel
from services.image_loader import ImageLoader
from utils.coordinate_transforms import fit_contain, clamp
from components.transform_widgets import (
	GestureController, PointerEvent, StageRect, create_mode,
	POINTER_DOWN, POINTER_MOVE, POINTER_UP, POINTER_CANCEL,
)

logger = logging.getLogger(__name__)


def pil_to_qimage(img):
	"""Convert an RGBA PIL image into a QImage that owns its pixels"""
	img = img.convert('RGBA')
	data = img.tobytes('raw', 'RGBA')
	qimage = QImage(data, img.width, img.height, img.width * 4, QImage.Format_RGBA8888)
	return qimage.copy()


class StudioCanvas(QWidget):
	"""Stage widget bound to one StudioSession"""

	# Signals
	zoomChanged = pyqtSignal(float)  # New stage zoom factor
	gestureEnded = pyqtSignal()  # Pointer released after a move/resize/rotate

	def __init__(self, session, image_loader=None, parent=None):
		super().__init__(parent)
		self.setMouseTracking(True)
		self.setAttribute(Qt.WA_AcceptTouchEvents)
		self.setFocusPolicy(Qt.StrongFocus)
		self.setMinimumSize(300, 400)

		self.session = session
		self.image_loader = image_loader or ImageLoader()
		self.controller = GestureController(session)
		self._selected_mode = create_mode('selected')

		self._zoom = 1.0
		self._image_cache = {}  # source -> QImage, or None if it failed to decode

		self.session.add_listener(self._on_session_changed)

	# ------------------------------------------------------------------
	# Session binding
	# ------------------------------------------------------------------

	def _on_session_changed(self, reason):
		if reason in ('garment', 'view', 'layout') and self.controller.is_active():
			self.controller.cancel()
		self.update()

	def detach(self):
		"""Stop listening to the session (window teardown)"""
		self.session.remove_listener(self._on_session_changed)

	def clear_image_cache(self):
		self._image_cache.clear()
		self.update()

	def _qimage_for(self, source):
		"""Decoded QImage for an image source, or None if it cannot be decoded"""
		if source in self._image_cache:
			return self._image_cache[source]
		try:
			qimage = pil_to_qimage(self.image_loader.load(source))
		except ImageDecodeFailure as e:
			logger.warning("Canvas could not decode image: %s", e)
			qimage = None
		self._image_cache[source] = qimage
		return qimage

	# ------------------------------------------------------------------
	# Zoom
	# ------------------------------------------------------------------

	@property
	def zoom(self):
		return self._zoom

	def set_zoom(self, zoom):
		zoom = round(clamp(zoom, MIN_STAGE_ZOOM, MAX_STAGE_ZOOM), 2)
		if zoom == self._zoom:
			return
		self._zoom = zoom
		self.zoomChanged.emit(zoom)
		self.update()

	def zoom_in(self):
		self.set_zoom(self._zoom + STAGE_ZOOM_STEP)

	def zoom_out(self):
		self.set_zoom(self._zoom - STAGE_ZOOM_STEP)

	def reset_zoom(self):
		self.set_zoom(1.0)

	# ------------------------------------------------------------------
	# Geometry
	# ------------------------------------------------------------------

	def stage_rect(self):
		"""Screen rect of the (zoomed) stage box, centered in the widget"""
		geometry = fit_contain(max(1, self.width()), max(1, self.height()), STAGE_WIDTH, STAGE_HEIGHT)
		width = geometry.render_w * self._zoom
		height = geometry.render_h * self._zoom
		left = (self.width() - width) / 2
		top = (self.height() - height) / 2
		return StageRect(left, top, width, height, self._zoom)

	def _element_rect(self, element, qimage, stage):
		"""Centered target rect of an element in its own (unrotated) frame"""
		width = BASE_ELEMENT_SIZE * element.scale * stage.pixels_per_stage_unit
		if qimage is not None and qimage.width() > 0:
			height = qimage.height() / qimage.width() * width
		else:
			height = width
		return QRectF(-width / 2, -height / 2, width, height)

	# ------------------------------------------------------------------
	# Painting
	# ------------------------------------------------------------------

	def paintEvent(self, event):
		painter = QPainter(self)
		painter.setRenderHint(QPainter.Antialiasing)
		painter.setRenderHint(QPainter.SmoothPixmapTransform)
		painter.fillRect(self.rect(), QColor(244, 244, 245))

		if self.session.garment is None:
			self._paint_message(painter, "Select a garment to start designing")
			return

		stage = self.stage_rect()
		base_source = self.session.base_image()
		base = self._qimage_for(base_source) if base_source else None
		if base is None:
			self._paint_message(painter, "Preview not ready")
			return

		stage_box = QRectF(stage.left, stage.top, stage.width, stage.height)
		painter.fillRect(stage_box, QColor(255, 255, 255))
		geometry = fit_contain(stage.width, stage.height, base.width(), base.height())
		painter.drawImage(QRectF(stage.left + geometry.offset_x, stage.top + geometry.offset_y,
								 geometry.render_w, geometry.render_h), base)

		for element in self.session.elements():
			self._paint_element(painter, element, stage)

		selected = self.session.selected_element()
		if selected is not None:
			self._paint_selection(painter, selected, stage)

	def _paint_message(self, painter, text):
		painter.setPen(QColor(113, 113, 122))
		painter.setFont(QFont(self.font().family(), 11))
		painter.drawText(self.rect(), Qt.AlignCenter, text)

	def _paint_element(self, painter, element, stage):
		qimage = self._qimage_for(element.image_source)
		center = stage.percent_to_screen(element.position)
		target = self._element_rect(element, qimage, stage)

		painter.save()
		painter.translate(center.x, center.y)
		painter.rotate(element.rotation)
		painter.setOpacity(element.opacity)
		if qimage is not None:
			painter.drawImage(target, qimage)
		else:
			# Placeholder for an overlay that failed to decode
			pen = QPen(QColor(239, 68, 68), 1)
			pen.setStyle(Qt.DotLine)
			painter.setPen(pen)
			painter.setBrush(Qt.NoBrush)
			painter.drawRect(target)
			painter.drawLine(target.topLeft(), target.bottomRight())
			painter.drawLine(target.topRight(), target.bottomLeft())
		painter.restore()

	def _paint_selection(self, painter, element, stage):
		center = stage.percent_to_screen(element.position)
		half_size = self.controller.handle_box_half_size(element, stage)
		handles = self._selected_mode.get_handles()
		# Outline first so the buttons sit on top of it
		for key in ('body', 'nw', 'ne', 'sw', 'se', 'rotate', 'delete'):
			handles[key].draw(painter, center.x, center.y, half_size, element.rotation)

	# ------------------------------------------------------------------
	# Pointer input
	# ------------------------------------------------------------------

	def _dispatch(self, kind, pos):
		"""Feed one pointer event to the controller"""
		if self.session.garment is None:
			return None
		event = PointerEvent.at(kind, pos.x(), pos.y())
		try:
			if kind == POINTER_DOWN:
				return self.controller.handle_event(event, self.stage_rect())
			return self.controller.handle_event(event)
		except NoActiveGarment:
			return None

	def mousePressEvent(self, event):
		if event.button() == Qt.LeftButton:
			self._dispatch(POINTER_DOWN, event.pos())
			event.accept()
			return
		super().mousePressEvent(event)

	def mouseMoveEvent(self, event):
		if self.controller.is_active():
			self._dispatch(POINTER_MOVE, event.pos())
			event.accept()
			return
		self._update_hover_cursor(event.pos())
		super().mouseMoveEvent(event)

	def mouseReleaseEvent(self, event):
		if event.button() == Qt.LeftButton and self.controller.is_active():
			self._dispatch(POINTER_UP, event.pos())
			self.gestureEnded.emit()
			event.accept()
			return
		super().mouseReleaseEvent(event)

	def event(self, event):
		"""Touch input maps to the same pointer events as the mouse"""
		kind = {
			QEvent.TouchBegin: POINTER_DOWN,
			QEvent.TouchUpdate: POINTER_MOVE,
			QEvent.TouchEnd: POINTER_UP,
			QEvent.TouchCancel: POINTER_CANCEL,
		}.get(event.type())
		if kind is None:
			return super().event(event)

		points = event.touchPoints()
		if kind == POINTER_CANCEL or not points:
			self.controller.cancel()
		else:
			was_active = self.controller.is_active()
			self._dispatch(kind, points[0].pos())
			if kind == POINTER_UP and was_active:
				self.gestureEnded.emit()
		event.accept()
		return True

	def _update_hover_cursor(self, pos):
		if self.session.garment is None:
			self.setCursor(Qt.ArrowCursor)
			return
		_, handle = self.controller.hit_test(ScreenPixel(pos.x(), pos.y()), self.stage_rect())
		self.setCursor(handle.get_cursor() if handle is not None else Qt.ArrowCursor)

	def wheelEvent(self, event):
		"""Ctrl+wheel zooms the stage"""
		if event.modifiers() & Qt.ControlModifier:
			if event.angleDelta().y() > 0:
				self.zoom_in()
			elif event.angleDelta().y() < 0:
				self.zoom_out()
			event.accept()
			return
		super().wheelEvent(event)

	def keyPressEvent(self, event):
		if event.key() == Qt.Key_Escape and self.controller.is_active():
			self.controller.cancel()
			event.accept()
			return
		if event.key() == Qt.Key_Delete:
			selected = self.session.selected_element()
			if selected is not None:
				self.session.remove_element(self.session.active_view, selected.id)
				event.accept()
				return
		super().keyPressEvent(event)
