import errno
import os
import stat
import tempfile


class AtomicFile:
    """A text file that only appears at its final path once fully written.

    Data goes to a uniquely named temporary file in the same directory,
    which is renamed over the final path by commit(). If anything fails
    before that, discard() removes the temporary file and the final path
    keeps whatever it held before.

    Usage:
        atomic = AtomicFile(path)
        f = atomic.open()
        with atomic:
            f.write(...)
    """

    def __init__(self, path, fsync=True):
        self.path = os.fspath(path)
        self.fsync = fsync
        self.temp_path = None
        self.file = None

    def open(self):
        """Create the temporary file and return it open for writing.

        Raises:
            OSError: the temporary file could not be created, or the path is a directory
        """
        if os.path.isdir(self.path):
            raise IsADirectoryError(errno.EISDIR, os.strerror(errno.EISDIR), self.path)
        directory = os.path.dirname(os.path.abspath(self.path))
        fd, self.temp_path = tempfile.mkstemp(
            dir=directory, prefix=f".{os.path.basename(self.path)}.", suffix='.tmp'
        )
        try:
            os.fchmod(fd, self._target_mode())
            self.file = os.fdopen(fd, 'w', encoding='utf-8', newline='\n')
        except BaseException:
            os.close(fd)
            self._remove_temp()
            raise
        return self.file

    def _target_mode(self):
        # Keep the mode of the file being replaced, else 0666 minus the umask
        try:
            return stat.S_IMODE(os.stat(self.path).st_mode)
        except FileNotFoundError:
            umask = os.umask(0)
            os.umask(umask)
            return 0o666 & ~umask

    def commit(self):
        """Flush, close and rename the temporary file onto the final path."""
        try:
            self.file.flush()
            if self.fsync:
                os.fsync(self.file.fileno())
        finally:
            self.file.close()
        # Atomic rename
        os.replace(self.temp_path, self.path)
        self.temp_path = None

    def discard(self):
        """Close and delete the temporary file."""
        if self.file is not None and not self.file.closed:
            self.file.close()
        self._remove_temp()

    def _remove_temp(self):
        if self.temp_path is not None:
            try:
                os.remove(self.temp_path)
            except FileNotFoundError:
                pass
            self.temp_path = None

    def __enter__(self):
        if self.file is None:
            self.open()
        return self.file

    def __exit__(self, exc_type, exc, tb):
        if exc_type is not None:
            self.discard()
            return False
        try:
            self.commit()
        except BaseException:
            self.discard()
            raise
        return False
