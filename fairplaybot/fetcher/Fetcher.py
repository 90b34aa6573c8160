class Fetcher:
    def fetch(self, url: str) -> str:
        ...
