from dotenv import load_dotenv

from src.hr_payroll.hr_payroll.main import create_app

load_dotenv(override=False)

app = create_app()

if __name__ == "__main__":
    app.run(debug=bool(app.config.get("DEBUG", False)))
