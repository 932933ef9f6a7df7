from submissions_bot.telegram_bot import run_polling


if __name__ == "__main__":
    run_polling()
