import uvicorn

from sellsight.config import settings


def main():
    uvicorn.run("sellsight.main:app", host=settings.HOST, port=settings.PORT, log_config=None)


if __name__ == "__main__":
    main()
