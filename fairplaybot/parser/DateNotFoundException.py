class DateNotFoundException(Exception):
    def __init__(self, label: str, hops: int) -> None:
        self.label = label
        self.hops = hops
        super().__init__(f'Date "{label}" not found within {hops} hops')


class ResolutionCancelledException(Exception):
    def __init__(self, label: str, hops: int) -> None:
        self.label = label
        self.hops = hops
        super().__init__(f'Resolution of "{label}" cancelled after {hops} hops')
