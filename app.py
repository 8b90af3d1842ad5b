from docparse.main import main

if __name__ == "__main__":

    # Run the FastAPI app with uvicorn
    main()
