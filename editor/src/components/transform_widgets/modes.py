"""Handle modes - defines which handles an element exposes."""

from .handles import CornerHandle, RotationHandle, DeleteHandle, BodyHandle


class HandleMode:
	"""Base class for handle modes."""
	
	# Handle keys in hit-test priority order
	check_order = ()
	
	def __init__(self):
		self.handles = {}  # handle_key -> handle_object
	
	def get_handles(self):
		"""Return all handles for this mode."""
		return self.handles
	
	def get_handle_at_pos(self, pointer_x, pointer_y, center_x, center_y, half_size, rotation):
		"""Find which handle (if any) is at the pointer position.
		
		Returns:
			Handle object or None
		"""
		for handle_key in self.check_order:
			handle = self.handles[handle_key]
			if handle.hit_test(pointer_x, pointer_y, center_x, center_y, half_size, rotation):
				return handle
		return None


class SelectedMode(HandleMode):
	"""Selected element - dashed box with rotate, delete and corner handles."""
	
	# Buttons outside the box first, then corners, then the body
	check_order = (
		'rotate',
		'delete',
		'nw', 'ne', 'sw', 'se',
		'body',
	)
	
	def __init__(self):
		super().__init__()
		
		self.handles = {
			'rotate': RotationHandle(),
			'delete': DeleteHandle(),
			
			# Corners (uniform scaling)
			'nw': CornerHandle('nw'),
			'ne': CornerHandle('ne'),
			'sw': CornerHandle('sw'),
			'se': CornerHandle('se'),
			
			# Element body (move)
			'body': BodyHandle(),
		}


class IdleMode(HandleMode):
	"""Unselected element - only the body can be grabbed."""
	
	check_order = ('body',)
	
	def __init__(self):
		super().__init__()
		self.handles = {
			'body': BodyHandle(),
		}


# Mode registry
MODES = {
	'selected': SelectedMode,
	'idle': IdleMode,
}


def create_mode(mode_name):
	"""Factory function to create mode instances.
	
	Args:
		mode_name: 'selected' or 'idle'
		
	Returns:
		HandleMode instance
	"""
	mode_class = MODES.get(mode_name, IdleMode)
	return mode_class()
