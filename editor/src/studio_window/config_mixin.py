"""Configuration management for GarmentStudio"""

import os
import json
from PyQt5.QtWidgets import QMessageBox

from constants import MAX_RECENT_FILES, CONFIG_FILE_NAME
from utils.logger import loggerRaise


class ConfigMixin:
	"""Configuration file operations and recent layout files"""

	def _init_config(self, config_dir):
		self.recent_files = []
		self.max_recent_files = MAX_RECENT_FILES
		self.last_export_dir = ''
		self.last_image_dir = ''
		self.config_dir = config_dir
		self.config_file = os.path.join(self.config_dir, CONFIG_FILE_NAME)
		self._load_config()

	def _load_config(self):
		"""Load recent files and settings from config file"""
		try:
			if os.path.exists(self.config_file):
				with open(self.config_file, 'r', encoding='utf-8') as f:
					config = json.load(f)
				# Filter out files that no longer exist
				self.recent_files = [f for f in config.get('recent_files', []) if os.path.exists(f)]
				self.last_export_dir = config.get('last_export_dir', '')
				self.last_image_dir = config.get('last_image_dir', '')
		except (OSError, ValueError) as e:
			loggerRaise(e, "Error loading config")

	def _save_config(self):
		"""Save recent files and settings to config file"""
		try:
			os.makedirs(self.config_dir, exist_ok=True)

			config = {
				'recent_files': self.recent_files[:self.max_recent_files],
				'last_export_dir': self.last_export_dir,
				'last_image_dir': self.last_image_dir,
			}

			with open(self.config_file, 'w', encoding='utf-8') as f:
				json.dump(config, f, indent=2)
		except OSError as e:
			loggerRaise(e, "Error saving config")

	def _remember_export_dir(self, filepath):
		self.last_export_dir = os.path.dirname(os.path.abspath(filepath))
		self._save_config()

	def _remember_image_dir(self, filepath):
		self.last_image_dir = os.path.dirname(os.path.abspath(filepath))
		self._save_config()

	def _add_to_recent_files(self, filepath):
		"""Add a layout file to the front of the recent files list"""
		if filepath in self.recent_files:
			self.recent_files.remove(filepath)
		self.recent_files.insert(0, filepath)
		self.recent_files = self.recent_files[:self.max_recent_files]

		if hasattr(self, 'recent_menu'):
			self._update_recent_files_menu()
		self._save_config()

	def _update_recent_files_menu(self):
		"""Update the Recent Layouts submenu"""
		self.recent_menu.clear()

		if not self.recent_files:
			no_recent = self.recent_menu.addAction("No recent layouts")
			no_recent.setEnabled(False)
		else:
			for filepath in self.recent_files:
				if os.path.exists(filepath):
					action = self.recent_menu.addAction(os.path.basename(filepath))
					action.setToolTip(filepath)
					# Default argument captures filepath
					action.triggered.connect(lambda checked, f=filepath: self._open_recent_file(f))

			self.recent_menu.addSeparator()
			clear_action = self.recent_menu.addAction("Clear Recent Layouts")
			clear_action.triggered.connect(self._clear_recent_files)

	def _clear_recent_files(self):
		self.recent_files = []
		self._update_recent_files_menu()
		self._save_config()

	def _open_recent_file(self, filepath):
		"""Open a layout from the recent files list"""
		if not os.path.exists(filepath):
			QMessageBox.warning(self, "File Not Found", f"The file no longer exists:\n{filepath}")
			self.recent_files.remove(filepath)
			self._update_recent_files_menu()
			self._save_config()
			return
		self.open_layout_file(filepath)

	def _update_window_title(self):
		"""Update window title with current layout file name"""
		modified = "" if self.is_saved else "*"
		if self.current_file_path:
			filename = os.path.basename(self.current_file_path)
			self.setWindowTitle(f"{filename}{modified} - Garment Design Studio")
		else:
			self.setWindowTitle(f"Untitled{modified} - Garment Design Studio")

	def _prompt_save_if_needed(self):
		"""Prompt user to save if there are unsaved changes

		Returns:
			True if it's safe to proceed (saved or discarded)
			False if user cancelled
		"""
		if not self.is_saved:
			reply = QMessageBox.question(
				self,
				"Unsaved Changes",
				"Do you want to save your layout?",
				QMessageBox.Save | QMessageBox.Discard | QMessageBox.Cancel,
				QMessageBox.Save
			)

			if reply == QMessageBox.Save:
				self.save_layout()
				# Save dialog may have been cancelled
				return self.is_saved
			elif reply == QMessageBox.Cancel:
				return False

		return True
