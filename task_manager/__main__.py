import uvicorn

from task_manager.config import settings


def main() -> None:
    uvicorn.run("task_manager.main:app", host=settings.HOST, port=settings.PORT)


if __name__ == "__main__":
    main()
