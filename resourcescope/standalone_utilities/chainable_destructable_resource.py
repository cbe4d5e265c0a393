"""
A resource-release pattern to ensure cleanup without requiring the resource
user to explicitly call a cleanup function.
"""

class ChainableDestructableResource:
    """
    Implements a nested resource destructor pattern.
    For a number of nested resources (the nesting being explicitly declared),
    an item at any level can be used as a context manager in which all
    subresources are cleaned up at the end, most recently added first, before
    the item itself is released. Subresources typically depend on their owner
    (a lock held on an open file), so they must go first.

    The owner is released even if releasing a subresource raises.

    Example usage:
    ```py
    class Lock(ChainableDestructableResource):
        def __init__(self, file):
            self.file = file
            fcntl.flock(file.fileno(), fcntl.LOCK_EX)

        def release(self) -> None:
            fcntl.flock(self.file.fileno(), fcntl.LOCK_UN)

    class LockedFile(ChainableDestructableResource):
        def __init__(self, path):
            self.file = open(path, 'rb')
            self.add_subresource(Lock(self.file))

        def release(self) -> None:
            self.file.close()

    with LockedFile('data.bin') as r:
        r.file.read()
    # the file is unlocked, then closed
    ```
    """
    _subresources: list['ChainableDestructableResource']

    def add_subresource(self, resource: 'ChainableDestructableResource'):
        """
        Use this method to indicate which resources should be triggered to clean up
        when this given resource is cleaning up.
        """
        self._ensure_initialized()
        self._subresources.append(resource)

    def release(self) -> None:
        """
        If this given resource has specific cleanup to do, in addition to just
        delegating cleanup to subresources, override this method to do so.
        """
        pass

    def _ensure_initialized(self) -> None:
        if not hasattr(self, '_subresources'):
            self._subresources = []

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self._release()

    def _release(self) -> None:
        try:
            self._release_others()
        finally:
            self.release()

    def _release_others(self) -> None:
        self._ensure_initialized()
        if not self._subresources:
            return
        resource = self._subresources.pop()
        try:
            resource.__exit__(None, None, None)
        finally:
            self._release_others()
