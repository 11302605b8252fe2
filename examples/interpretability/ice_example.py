import pandas as pd
from sklearn.datasets import load_breast_cancer
from sklearn.ensemble import RandomForestClassifier
from sklearn.model_selection import train_test_split

from tabular_dependence import (
    ICETransformer,
    NumericFeature,
    partial_dependence,
)

data = load_breast_cancer(as_frame=True)
X, y = data.data, data.target

# Split data
X_train, X_test, y_train, y_test = train_test_split(X, y, test_size=0.5, random_state=0)

# Initialize and train model
clf = RandomForestClassifier(n_estimators=50, random_state=0)
clf.fit(X_train, y_train)

# Partial dependence of the positive class on two features
pdp = partial_dependence(
    clf,
    X_test,
    numeric_features=[
        NumericFeature("mean radius", split_count=20),
        NumericFeature("mean texture", split_count=20),
    ],
    target_classes=[1],
)
for column in pdp.columns:
    curve = {round(k, 2): round(float(v[0]), 3) for k, v in pdp[column].iloc[0].items()}
    print(column, curve)

# ICE curves for a sample of 5 test instances
ice = ICETransformer(
    clf,
    kind="individual",
    numeric_features=[NumericFeature("mean radius", split_count=10)],
    target_classes=[1],
    num_samples=5,
    random_state=0,
    verbose=1,
).explain(X_test)

curves = pd.DataFrame(
    {idx: {k: float(v[0]) for k, v in m.items()} for idx, m in ice["mean radius_dependence"].items()}
)
print(curves.round(3))
