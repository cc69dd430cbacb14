import pytest


@pytest.fixture(scope="session")
def pairs_text():
    """Two numeric columns, two rows"""
    return "@RELATION Data\n@ATTRIBUTE a NUMERIC\n@ATTRIBUTE b NUMERIC\n\n@DATA\n42, 9\n7, 5"


@pytest.fixture(scope="session")
def iris_text():
    """A small excerpt of the classic iris data set, with comments and mixed case directives"""
    return (
        "% 1. Title: Iris Plants Database\n"
        "%\n"
        "@RELATION iris\n"
        "\n"
        "@ATTRIBUTE sepallength REAL\n"
        "@attribute sepalwidth  REAL\n"
        "@ATTRIBUTE petallength NUMERIC\n"
        "@ATTRIBUTE petalwidth  NUMERIC\n"
        "@ATTRIBUTE class {Iris-setosa,Iris-versicolor,Iris-virginica}\n"
        "\n"
        "@DATA\n"
        "5.1,3.5,1.4,0.2,Iris-setosa\n"
        "% a comment between rows\n"
        "7.0,3.2,4.7,1.4,Iris-versicolor\n"
        "6.3,3.3,6.0,?,Iris-virginica\n"
    )


@pytest.fixture(scope="session")
def mixed_text():
    """Numeric, string and nominal columns, with quoting and missing values"""
    return (
        "@relation 'weather data'\n"
        "@attribute id INTEGER\n"
        "@attribute note STRING\n"
        "@attribute outlook {sunny, overcast, 'light rain'}\n"
        "@attribute temp REAL\n"
        "@data\n"
        "1, 'hot, dry', sunny, 85\n"
        "2, ?, 'light rain', -3.5\n"
        "300, 'it\\'s', ?, ?\n"
    )
