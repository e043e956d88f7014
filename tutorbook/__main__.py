import uvicorn

from tutorbook.settings import settings


def main() -> None:
    uvicorn.run("tutorbook.main:app", host=settings.host, port=settings.port, reload=settings.reload)


if __name__ == "__main__":
    main()
